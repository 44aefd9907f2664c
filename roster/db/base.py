# Garante o registro de TODAS as models no mesmo registry
from roster.db.base_class import Base  # noqa
from roster.models.student import Student  # noqa
