"""Raw bus line record as stored in schedule files."""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class BusLineRecord(BaseModel):
    """Shape of one bus line in the schedule file (camelCase keys)."""

    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    bus_number: str = Field(alias="busNumber")
    start_point: str = Field(alias="startPoint")
    end_point: str = Field(alias="endPoint")
    first_departure_time: str = Field(alias="firstDepartureTime")
    frequency_minutes: int = Field(alias="frequencyMinutes", strict=True)


BUS_LINE_RECORDS = TypeAdapter(list[BusLineRecord])
