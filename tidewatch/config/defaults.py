"""Default coastal spots, also used as the wave-data fallback list."""

from tidewatch.config.schema import SpotConfig

DEFAULT_SPOTS: list[SpotConfig] = [
    SpotConfig(name="Sydney", slug="sydney", latitude=-33.8688, longitude=151.2093),
    SpotConfig(name="Bondi", slug="bondi", latitude=-33.8915, longitude=151.2767),
    SpotConfig(name="Manly", slug="manly", latitude=-33.7967, longitude=151.2850),
    SpotConfig(name="Palm Beach", slug="palm-beach", latitude=-33.5967, longitude=151.3233),
    SpotConfig(name="Clareville", slug="clareville", latitude=-33.6333, longitude=151.3333),
    SpotConfig(name="Newcastle", slug="newcastle", latitude=-32.9283, longitude=151.7817),
    SpotConfig(name="Gold Coast", slug="gold-coast", latitude=-28.0167, longitude=153.4000),
    SpotConfig(name="Brisbane", slug="brisbane", latitude=-27.4698, longitude=153.0251),
    SpotConfig(name="Melbourne", slug="melbourne", latitude=-37.8136, longitude=144.9631),
    SpotConfig(name="Adelaide", slug="adelaide", latitude=-34.9285, longitude=138.6007),
    SpotConfig(name="Perth", slug="perth", latitude=-31.9505, longitude=115.8605),
]
