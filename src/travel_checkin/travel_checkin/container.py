from __future__ import annotations

from dataclasses import dataclass

from .core.constants import (
    DEFAULT_COUNT_CHECKED_OUT_AS_CHECKED_IN,
    DEFAULT_GATE_DEPARTURES_ON_ARRIVAL_CHECK_IN,
)
from .database.connection import DBConfig, DatabaseConnection
from .travelers.mysql_traveler_repository import MySQLTravelerRepository
from .travelers.repository import TravelerRepository
from .travelers.service import TravelerService
from .travelers.store import TravelerStore


@dataclass(frozen=True)
class Container:
    travelers_repo: TravelerRepository
    traveler_store: TravelerStore
    traveler_service: TravelerService


def build_services(
    travelers_repo: TravelerRepository,
    *,
    gate_departures: bool = DEFAULT_GATE_DEPARTURES_ON_ARRIVAL_CHECK_IN,
    count_checked_out: bool = DEFAULT_COUNT_CHECKED_OUT_AS_CHECKED_IN,
    now=None,
    id_factory=None,
) -> Container:
    store = TravelerStore(
        travelers_repo,
        gate_departures=gate_departures,
        count_checked_out=count_checked_out,
        now=now,
    )
    service = TravelerService(travelers_repo, store, id_factory=id_factory)
    return Container(travelers_repo=travelers_repo, traveler_store=store, traveler_service=service)


def build_container(
    *,
    db_config: dict,
    gate_departures: bool = DEFAULT_GATE_DEPARTURES_ON_ARRIVAL_CHECK_IN,
    count_checked_out: bool = DEFAULT_COUNT_CHECKED_OUT_AS_CHECKED_IN,
) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return build_services(
        MySQLTravelerRepository(conn),
        gate_departures=gate_departures,
        count_checked_out=count_checked_out,
    )
