"""sensor-sheet — Extract sensor time series from fixed-layout spreadsheets."""

__version__ = "0.1.0"

# Sheet layout contract (zero-based indices).
SENSOR_ID_ROW: int = 0
DESIGNATION_ROW: int = 1
HEADER_ROW: int = 2
FIRST_DATA_ROW: int = 3
FIRST_VALUE_COLUMN: int = 2
TIMESTAMP_COLUMNS: tuple[int, ...] = (0, 1)

SENSOR_ID_PREFIX: str = "Sensor ID: "
