"""Minimal construct host: tree, units, resources and tokens.

Only what function constructs need from their surroundings:
- construct: tree nodes with stable addresses
- stack: DeploymentUnit with a resource arena keyed by logical id
- app: App root with session mode and the active deployment pass
- resources: template resources (functions, roles, layers, parameters, urls)
- binding / permissions: bound resource and grant helpers
"""
