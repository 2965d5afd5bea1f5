from __future__ import annotations

from classroom_attendance.config import load_settings
from classroom_attendance.database.bootstrap import apply_seed_sql, ensure_demo_users


def main() -> None:
    settings = load_settings()
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config)
    ensure_demo_users(db_config)

    print(
        "OK: Seeded database (sections, sample students, instructor account) -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
