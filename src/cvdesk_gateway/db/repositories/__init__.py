"""
cvdesk_gateway.db.repositories

Data-access repositories; import from the submodules directly.
"""
