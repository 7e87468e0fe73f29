"""Example: reconcile a batch of rows without Flask or a database.

Shows the read path only: raw rows -> persons, gated departures, flight groups.
"""

from src.travel_checkin.travel_checkin.travelers.grouping import group_by_flight
from src.travel_checkin.travel_checkin.travelers.reconciler import reconcile

ROWS = [
    {"id": "1", "name": "Ana Lee", "kind": "arrival", "flight_label": "AL66", "time_label": "2024-08-10", "checked_in": 1},
    {"id": "2", "name": "Ana Lee", "kind": "departure", "flight_label": "CA21", "time_label": "2024-08-11"},
    {"id": "3", "name": " ana  lee ", "kind": "arrival", "flight_label": "AL67", "time_label": "2024-08-10"},
    {"id": "4", "name": "Bo Li", "kind": "cruise", "flight_label": "MSC Aurora", "time_label": "2024-08-13"},
    {"id": "5", "name": None, "kind": "arrival"},
]


def main():
    result = reconcile(ROWS)
    for person in result.persons:
        print(person.person_key, len(person.arrival_segments), len(person.departure_segments))
    print("visible departures:", [s.id for s in result.departures])
    print("skipped:", result.skipped_count)
    for key, segments in group_by_flight(result.arrivals):
        print(key, [s.name for s in segments])


if __name__ == "__main__":
    main()
