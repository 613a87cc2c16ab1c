"""Example: drive the service layer directly against a MySQL database.

Load the schema first (src/hours_ledger/database/schema.sql) and point the
DB_* environment variables (or a .env file) at it.
"""

from hours_ledger.main import build_from_env


def main():
    container = build_from_env()
    worktime = container.worktime_service

    worktime.submit_self(actor_id=1, work_date="2024-03-01", hours=8, location="Site A")
    worktime.submit_for_worker(supervisor_id=10, worker_id=1, work_date="2024-03-01", hours="7.5")

    comparison = container.reconciliation_service.compare(1, "2024-03-01")
    print(comparison.status.value, comparison.difference)

    for c in container.reconciliation_service.find_mismatches("2024-03-01", "2024-03-31"):
        print(c.worker_id, c.work_date, c.difference)

    print("completed", container.aggregation_service.completed_hours(1, "2024-03"))
    print("bonus", container.bonus_service.calculate_bonus(1, "2024-03"))
    print("progress", container.target_hours_service.progress(1, "2024-03"))


if __name__ == "__main__":
    main()
