"""Basic usage examples for the weather advisor library."""

from weatheradvisor import LocationResolver, build_advisor, load_settings


def main() -> None:
    settings = load_settings()

    with LocationResolver(settings.opencage_api_key) as resolver:
        print("=== Locations matching 'Hyderabad' ===")
        candidates = resolver.search("Hyderabad")
        for c in candidates[:5]:
            print(f"  {c.formatted} ({c.lat:.4f}, {c.lng:.4f})")

    if not candidates:
        print("  No locations found.")
        return

    location = candidates[0].to_location()
    advisor = build_advisor(settings)
    try:
        snapshot = advisor.weather.get_snapshot(location)
        print(f"\n=== Current weather in {location.label} ===")
        print(f"  {snapshot.current.temp:.0f}°F, {snapshot.current.description}")
        print(f"  Humidity: {snapshot.current.humidity}%, Wind: {snapshot.current.wind_speed} mph")

        print("\n=== Ask a question ===")
        for question in ("Will it rain tomorrow?", "What should I wear today?"):
            result = advisor.answer(question, location, session_id="example")
            print(f"  Q: {question}  [{result.intent.value}, {result.source}]")
            print(f"  A: {result.answer}\n")

        print(f"=== History: {len(advisor.get_chat_history('example'))} turns ===")
    finally:
        advisor.close()


if __name__ == "__main__":
    main()
