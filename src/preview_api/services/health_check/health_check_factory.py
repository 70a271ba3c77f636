from datetime import datetime
from typing import List

from fastapi_healthcheck.enum import HealthCheckStatusEnum
from fastapi_healthcheck.model import HealthCheckEntityModel, HealthCheckModel

from preview_api.services.health_check.health_check_interface import (
    HealthCheckProtocol,
)


def _status_value(status) -> str:
    if isinstance(status, HealthCheckStatusEnum):
        return status.value
    return status


class HealthCheckFactory:
    def __init__(self) -> None:
        self._health_checks: List[HealthCheckProtocol] = []

    def add(self, item: HealthCheckProtocol) -> None:
        self._health_checks.append(item)

    @staticmethod
    def _dump(model: HealthCheckModel) -> dict:
        return {
            "status": _status_value(model.status),
            "totalTimeTaken": str(model.totalTimeTaken),
            "entities": [
                {
                    "alias": entity.alias,
                    "status": _status_value(entity.status),
                    "timeTaken": str(entity.timeTaken),
                    "tags": entity.tags,
                }
                for entity in model.entities
            ],
        }

    async def check(self) -> dict:
        health = HealthCheckModel()
        total_start = datetime.now()

        for item in self._health_checks:
            entity = HealthCheckEntityModel(alias=item.alias, tags=item.tags or [])

            start = datetime.now()
            entity.status = await item.check_health()
            entity.timeTaken = datetime.now() - start

            # one unhealthy dependency makes the whole service unhealthy
            if entity.status == HealthCheckStatusEnum.UNHEALTHY:
                health.status = HealthCheckStatusEnum.UNHEALTHY

            health.entities.append(entity)

        health.totalTimeTaken = datetime.now() - total_start
        return self._dump(health)
