from __future__ import annotations

import logging

from app.records.errors import GatewayError, IncidentNotFound, IntegrationUnavailable, NoIncidentLoaded
from app.records.gateway.base import QueryGateway
from app.records.handoff import INCIDENT_JSON_KEY, CrossSiteStorage, SessionHandoff
from app.records.models import IncidentDetails, IncidentRecord
from app.records.timeline.normalize import normalize_timeline

logger = logging.getLogger("ems_viewer.details")


def build_details(record: IncidentRecord) -> IncidentDetails:
    return IncidentDetails(
        incident_number=record.incident_number,
        unit_id=record.unit_id,
        address=record.location or "N/A",
        incident_type=record.incident_type or "N/A",
        timeline=normalize_timeline(record.content),
    )


class DetailsView:
    """One session's details view: the selected record and its select action."""

    def __init__(self, gateway: QueryGateway, handoff: SessionHandoff) -> None:
        self.gateway = gateway
        self.handoff = handoff
        self.record: IncidentRecord | None = None

    async def load(self) -> IncidentDetails:
        key = self.handoff.read_selection()
        result = await self.gateway.get_incident(key.incident_number, key.unit_id)
        if result.error:
            logger.warning("details load failed for %s/%s: %s", key.incident_number, key.unit_id, result.error)
            raise GatewayError(IncidentNotFound.message)
        if result.record is None:
            raise IncidentNotFound()

        self.record = result.record
        return build_details(result.record)

    def select(self, storage: CrossSiteStorage | None) -> str:
        """Write the record's raw content to the cross-site storage; returns what was written."""
        if self.record is None:
            raise NoIncidentLoaded()
        if storage is None:
            raise IntegrationUnavailable()

        content = self.record.content or ""
        storage.set(INCIDENT_JSON_KEY, content)
        logger.info("incident %s/%s handed to extension bridge", self.record.incident_number, self.record.unit_id)
        return content
