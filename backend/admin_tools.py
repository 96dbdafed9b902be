#!/usr/bin/env python3
"""
Admin tools for the MCQ Surgery platform
"""

import os
import sys
import argparse

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from dotenv import load_dotenv
dotenv_path = os.path.join(os.path.dirname(__file__), '.env')
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path)


from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError
from mcqprep.core.database import SessionLocal
from mcqprep.core.exceptions import AppError
from mcqprep.models import User, MCQ, MockTest, MCQAttempt, MockTestAttempt, Discussion
from mcqprep.schemas.user import UserCreate
from mcqprep.services.user_service import UserService
from mcqprep.services.subscription_service import SubscriptionService, PLANS
from mcqprep.services.access_control import has_premium_access
from mcqprep.utils.timezone import format_local_time


def create_admin_user(email: str, password: str, name: str) -> bool:
    """Create a user with admin rights"""
    db = SessionLocal()
    try:
        user_service = UserService(db)

        if user_service.get_user_by_email(email):
            print(f"User with email {email} already exists")
            return False

        user_data = UserCreate(email=email, password=password, name=name)
        user = user_service.create_user(user_data, is_superuser=True)
        print("Admin created")
        print(f"   Email: {user.email}")
        print(f"   Name: {user.name}")
        print(f"   ID: {user.id}")
        return True
    except (AppError, ValidationError, SQLAlchemyError) as e:
        print(f"Failed to create admin: {e}")
        db.rollback()
        return False
    finally:
        db.close()


def list_users(show_detailed: bool = False) -> None:
    """Print every user"""
    db = SessionLocal()
    try:
        users = db.query(User).order_by(User.id).all()
        if not users:
            print("No users found")
            return

        print(f"Total users: {len(users)}")
        print("=" * 80)
        for user in users:
            role = "admin" if user.is_superuser else "user"
            tier = "premium" if has_premium_access(user) else "free"
            print(f"ID: {user.id} | {role} | {tier}")
            print(f"   Name: {user.name}")
            print(f"   Email: {user.email}")
            print(f"   Created: {format_local_time(user.created_at)}")
            if user.subscription_expires_at:
                print(f"   Subscription expires: {format_local_time(user.subscription_expires_at)}")

            if show_detailed:
                practice = db.query(MCQAttempt).filter(
                    MCQAttempt.user_id == user.id,
                    MCQAttempt.mock_test_id.is_(None),
                ).count()
                tests = db.query(MockTestAttempt).filter(MockTestAttempt.user_id == user.id).count()
                print(f"   Practice answers: {practice} | Mock tests: {tests}")
            print("-" * 80)
    except SQLAlchemyError as e:
        print(f"Failed to list users: {e}")
    finally:
        db.close()


def grant_premium(email: str, plan_id: str) -> bool:
    """Activate a plan for a user without payment"""
    db = SessionLocal()
    try:
        user = UserService(db).get_user_by_email(email)
        if not user:
            print(f"User with email {email} not found")
            return False
        subscription = SubscriptionService(db).subscribe(user, plan_id)
        expires = format_local_time(subscription.expires_at) if subscription.expires_at else "never"
        print(f"Granted {subscription.plan.name} to {email} (expires: {expires})")
        return True
    except (AppError, SQLAlchemyError) as e:
        print(f"Failed to grant premium: {e}")
        db.rollback()
        return False
    finally:
        db.close()


def database_stats() -> None:
    """Print record counts"""
    db = SessionLocal()
    try:
        users = db.query(User).all()
        premium = sum(1 for u in users if has_premium_access(u))
        print("Database statistics")
        print("=" * 50)
        print(f"Users: {len(users)} (premium: {premium}, admins: {sum(1 for u in users if u.is_superuser)})")
        print(f"MCQs: {db.query(MCQ).count()} (premium: {db.query(MCQ).filter(MCQ.is_premium.is_(True)).count()})")
        print(f"Mock tests: {db.query(MockTest).count()}")
        print(f"Practice answers: {db.query(MCQAttempt).filter(MCQAttempt.mock_test_id.is_(None)).count()}")
        print(f"Mock test attempts: {db.query(MockTestAttempt).count()}")
        print(f"Discussions: {db.query(Discussion).count()}")
    except SQLAlchemyError as e:
        print(f"Failed to read statistics: {e}")
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Admin tools for the MCQ Surgery platform")
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    create_admin_parser = subparsers.add_parser('create-admin', help='Create an admin user')
    create_admin_parser.add_argument('--email', required=True)
    create_admin_parser.add_argument('--password', required=True)
    create_admin_parser.add_argument('--name', required=True)

    list_users_parser = subparsers.add_parser('list-users', help='List users')
    list_users_parser.add_argument('--detailed', action='store_true', help='Include attempt counts')

    grant_parser = subparsers.add_parser('grant-premium', help='Activate a subscription plan for a user')
    grant_parser.add_argument('--email', required=True)
    grant_parser.add_argument('--plan', choices=sorted(PLANS), default='monthly')

    subparsers.add_parser('stats', help='Show database statistics')

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    if args.command == 'create-admin':
        create_admin_user(args.email, args.password, args.name)

    elif args.command == 'list-users':
        list_users(args.detailed)

    elif args.command == 'grant-premium':
        grant_premium(args.email, args.plan)

    elif args.command == 'stats':
        database_stats()


if __name__ == "__main__":
    main()
