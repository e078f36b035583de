"""Literal input data and the names of tests other tests depend on."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

LOAD_PAGE = "should load the page"
LOGIN = "should login"
CREATE_PROJECT = "should create a project"
CREATE_FEED_SOURCE = "should create feed source"
EDIT_FROM_SCRATCH = "should edit a feed from scratch"
CREATE_AGENCY = "should create agency"
CREATE_ROUTE = "should create route"
CREATE_STOP = "should create stop"
CREATE_CALENDAR = "should create calendar"
CREATE_EXCEPTION = "should create exception"
CREATE_FARE = "should create fare"
CREATE_PATTERN = "should create pattern"
CREATE_TRIP = "should create trip"
CREATE_SNAPSHOT = "should create snapshot"


@dataclass(frozen=True)
class DummyStop:
    code: str
    description: str
    id: str
    lat: str
    lon: str
    name: str
    url: str
    location_type: str = "0"
    timezone: Tuple[str, int] = ("america/lo", 1)
    wheelchair_boarding: str = "1"
    zone_id: str = "1"


DUMMY_STOP_1 = DummyStop(
    code="1",
    description="test 1",
    id="test-stop-1",
    lat="37.04671717",
    lon="-122.07529759",
    name="Laurel Dr and Valley Dr",
    url="example.stop/1",
)

DUMMY_STOP_2 = DummyStop(
    code="2",
    description="test 2",
    id="test-stop-2",
    lat="37.04783038",
    lon="-122.07521176",
    name="Russell Ave and Valley Dr",
    url="example.stop/2",
)

UPLOADED_FEED_VALIDITY = "Valid from Jan. 01, 2014 to Dec. 31, 2018"
FETCHED_FEED_VALIDITY = "Valid from Apr. 08, 2018 to Jun. 30, 2018"
SNAPSHOT_FEED_VALIDITY = "Valid from May. 29, 2018 to May. 29, 2028"

TRIP_PLAN_QUERY = {
    "fromPlace": "37.04532992924222,-122.07542181015015",
    "toPlace": "37.04899494106061,-122.07432746887208",
    "time": "12:32am",
    "date": "07-24-2018",
    "mode": "TRANSIT,WALK",
    "maxWalkDistance": "804.672",
    "arriveBy": "false",
    "wheelchair": "false",
    "locale": "en",
}
