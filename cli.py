import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from dharmacal.errors import DharmaCalError
from dharmacal.routers.occurrences import EventPayload
from dharmacal.schemas.panchanga import Location
from dharmacal.schemas.recurrence import DateWindow, RecurrenceOptions
from dharmacal.services.day_store import InMemoryDayAttributeStore
from dharmacal.services.panchanga_cache import PanchangaCache
from dharmacal.services.panchanga_service import PanchangaService
from dharmacal.services.precompute import populate_day_attributes
from dharmacal.services.recurrence import generate_results_for_events
from dharmacal.services.swiss_engine import SwissPanchangaEngine
from dharmacal.services.util.place_defaults import normalize_place


def _place(args):
    place, _ = normalize_place(args.lat, args.lon, args.tz, args.name)
    return Location(name=place["name"], lat=place["lat"], lon=place["lon"]), place["tz"]


def daily_info(args, service: PanchangaService) -> None:
    location, tz = _place(args)
    snapshot = service.get_daily(args.date, location, tz)
    print(snapshot.model_dump_json(indent=2))


def occurrences(args, service: PanchangaService) -> None:
    location, tz = _place(args)
    raw = json.loads(Path(args.events).read_text(encoding="utf-8"))
    events = [EventPayload.model_validate(item).to_event() for item in raw]

    store = InMemoryDayAttributeStore()
    populate_day_attributes(service, store, args.start, args.end, location, tz)

    window = DateWindow(start=args.start, end=args.end)
    options = RecurrenceOptions(max_occurrences=args.max_occurrences)
    results = generate_results_for_events(events, window, store, options)
    print(json.dumps({event_id: result.model_dump(mode="json") for event_id, result in results.items()}, indent=2))


def main(argv=None) -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(prog="dharmacal")
    parser.add_argument("--lat", type=float)
    parser.add_argument("--lon", type=float)
    parser.add_argument("--tz")
    parser.add_argument("--name")
    sub = parser.add_subparsers(dest="command", required=True)

    day = sub.add_parser("daily-info", help="Print the Panchanga snapshot for one day")
    day.add_argument("date", help="YYYY-MM-DD")
    day.set_defaults(func=daily_info)

    occ = sub.add_parser("occurrences", help="Expand events from a JSON file over a window")
    occ.add_argument("events", help="JSON file with a list of events")
    occ.add_argument("--start", required=True)
    occ.add_argument("--end", required=True)
    occ.add_argument("--max-occurrences", type=int, default=None)
    occ.set_defaults(func=occurrences)

    args = parser.parse_args(argv)
    service = PanchangaService(SwissPanchangaEngine(), PanchangaCache())
    try:
        args.func(args, service)
    except (DharmaCalError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python cli.py [--lat LAT --lon LON --tz TZ] daily-info YYYY-MM-DD")
        print("       python cli.py occurrences events.json --start YYYY-MM-DD --end YYYY-MM-DD")
        sys.exit(1)
    main()
