"""Service layer: use cases returning ServiceResult."""
