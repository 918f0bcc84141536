#!/usr/bin/env python3
"""
Admin tools for ProctorHub

    proctorhub-admin init-db
    proctorhub-admin create-proctor --email p@example.com --password secret1 --name "Jane Doe"
    proctorhub-admin list-users [--role proctor]
    proctorhub-admin stats
    proctorhub-admin detector-token --name vision-worker [--expires-minutes 60]
"""
import argparse
import os
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv

dotenv_path = os.path.join(os.getcwd(), ".env")
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path)

from proctorhub.core.config import settings  # noqa: E402
from proctorhub.core.exceptions import ConflictError  # noqa: E402
from proctorhub.core.security import create_detector_token  # noqa: E402
from proctorhub.schemas.status import AlertStatus, EnrollmentStatus, Role  # noqa: E402
from proctorhub.schemas.user import UserCreate  # noqa: E402
from proctorhub.services.user_service import UserService  # noqa: E402
from proctorhub.storage import Storage, create_storage  # noqa: E402


def init_db(storage: Storage) -> bool:
    """Tables are created when the SQL backend is built"""
    if settings.storage_backend != "sql":
        print("Storage backend is 'memory'; nothing to initialize")
        return False
    print(f"Database ready at {settings.database_url}")
    return True


def create_proctor(storage: Storage, email: str, password: str, name: str) -> bool:
    user_service = UserService(storage)
    try:
        user = user_service.create_user(
            UserCreate(email=email, password=password, name=name, role=Role.PROCTOR)
        )
    except ConflictError:
        print(f"User with email {email} already exists")
        return False

    print("Proctor created")
    print(f"   Email: {user.email}")
    print(f"   Name: {user.name}")
    print(f"   ID: {user.id}")
    return True


def list_users(storage: Storage, role: Optional[str] = None) -> int:
    users = storage.list_users(role=Role(role)) if role else storage.list_users()
    if not users:
        print("No users found")
        return 0

    print(f"Total users: {len(users)}")
    print("=" * 80)
    for user in users:
        created = user.created_at.strftime("%d.%m.%Y %H:%M") if user.created_at else "-"
        print(f"ID: {user.id} | {user.role.value}")
        print(f"   Name: {user.name}")
        print(f"   Email: {user.email}")
        print(f"   Created: {created}")
        print("-" * 80)
    return len(users)


def database_stats(storage: Storage) -> dict:
    users = storage.list_users()
    exams = storage.list_exams()
    enrollments = storage.list_enrollments()
    alerts = storage.list_alerts()

    stats = {
        "students": sum(1 for u in users if u.role == Role.STUDENT),
        "proctors": sum(1 for u in users if u.role == Role.PROCTOR),
        "exams": len(exams),
        "active_exams": sum(1 for e in exams if e.is_active),
        "enrollments": {s.value: 0 for s in EnrollmentStatus},
        "alerts": {s.value: 0 for s in AlertStatus},
    }
    for enrollment in enrollments:
        stats["enrollments"][enrollment.status.value] += 1
    for alert in alerts:
        stats["alerts"][alert.status.value] += 1

    print("Storage statistics")
    print("=" * 50)
    print(f"Users: {stats['students']} students, {stats['proctors']} proctors")
    print(f"Exams: {stats['exams']} (active: {stats['active_exams']})")
    print("Enrollments: " + ", ".join(f"{k}={v}" for k, v in stats["enrollments"].items()))
    print("Alerts: " + ", ".join(f"{k}={v}" for k, v in stats["alerts"].items()))
    return stats


def issue_detector_token(name: str, expires_minutes: Optional[int] = None) -> str:
    expires = timedelta(minutes=expires_minutes) if expires_minutes else None
    token = create_detector_token(name, expires)
    print(token)
    return token


def main(argv=None):
    parser = argparse.ArgumentParser(description="ProctorHub admin tools")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("init-db", help="Create database tables")

    create_parser = subparsers.add_parser("create-proctor", help="Create a proctor account")
    create_parser.add_argument("--email", required=True)
    create_parser.add_argument("--password", required=True)
    create_parser.add_argument("--name", required=True)

    list_parser = subparsers.add_parser("list-users", help="List users")
    list_parser.add_argument("--role", choices=Role.values())

    subparsers.add_parser("stats", help="Show storage statistics")

    token_parser = subparsers.add_parser("detector-token", help="Issue a detector service token")
    token_parser.add_argument("--name", required=True, help="Detector name, carried in the token and logged with each alert it posts")
    token_parser.add_argument("--expires-minutes", type=int, help="Token lifetime, defaults to DETECTOR_TOKEN_EXPIRE_MINUTES (30 days)")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "detector-token":
        issue_detector_token(args.name, args.expires_minutes)
        return 0

    storage = create_storage(settings)
    try:
        if args.command == "init-db":
            return 0 if init_db(storage) else 1
        elif args.command == "create-proctor":
            return 0 if create_proctor(storage, args.email, args.password, args.name) else 1
        elif args.command == "list-users":
            list_users(storage, args.role)
        elif args.command == "stats":
            database_stats(storage)
    finally:
        storage.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
