"""Flask blueprint package for the invoicing routes.

Blueprints are defined in the sibling modules (e.g., ``invoice_routes``) and
registered in :func:`invoicing.create_app`.
"""
