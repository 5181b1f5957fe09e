"""Landing zone domain layer.

Pure provisioning model: organization tree, team descriptors, the shared
permission set, assignment deduplication and plan derivation.
"""
