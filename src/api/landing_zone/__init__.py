"""Landing zone bounded context.

Provisions organizational units, isolated team accounts and Identity
Center access from a single deployment descriptor.
"""
