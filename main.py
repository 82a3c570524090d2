"""Simple entrypoint to try the SkyMesh core locally."""

import json

from models.weather import WeatherReading
from skymesh_app.app import SkyMeshApp


def main() -> None:
    app = SkyMeshApp()
    reading = WeatherReading(
        city_name="Seoul",
        country="KR",
        description="clear sky",
        temperature=34.0,
        humidity=45,
        wind_speed=3.5,
        uv_index=8,
        air_quality=2,
        precipitation_probability=0.1,
        latitude=37.5665,
        longitude=126.9780,
    )
    print(json.dumps(app.background_for_reading(reading), indent=2))
    print(json.dumps([card.to_dict() for card in app.condition_cards(reading)], indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
