"""chlens: ClickHouse driver with result normalization and schema tree resolution."""
