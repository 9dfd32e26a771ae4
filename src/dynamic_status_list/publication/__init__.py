"""Status list publication: the signed identifier set, its engine and scheduler."""
from __future__ import annotations

from dynamic_status_list.publication.engine import PublicationEngine
from dynamic_status_list.publication.models import Publication
from dynamic_status_list.publication.scheduler import PublicationScheduler

__all__ = ["Publication", "PublicationEngine", "PublicationScheduler"]
