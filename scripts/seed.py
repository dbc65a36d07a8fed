#!/usr/bin/env python
"""Create the first super administrator and default reference data."""

import argparse
import asyncio
from datetime import date
from decimal import Decimal

from sqlalchemy import select

from workforce_api.database import async_session_maker, create_tables
from workforce_api.models.orm.reference import (
    AlertRuleORM,
    DocumentTypeORM,
    LeaveTypeORM,
    PayrollRuleORM,
    PayrollRuleVersionORM,
)
from workforce_api.models.orm.role import RoleORM
from workforce_api.models.orm.user import UserORM
from workforce_api.models.orm.user_role import UserRoleORM
from workforce_api.security.password import get_password_service
from workforce_api.services.permission_sync_service import sync_system_role_permissions

# code: (name_tr, name_ru, name_en, category, has_expiry, default_alert_days)
DOCUMENT_TYPES = {
    "PASSPORT": ("Pasaport", "Паспорт", "Passport", "IDENTITY", True, 60),
    "VISA": ("Vize", "Виза", "Visa", "IMMIGRATION", True, 30),
    "PATENT": ("Patent", "Патент", "Work patent", "IMMIGRATION", True, 30),
    "MIGRATION_CARD": ("Göç kartı", "Миграционная карта", "Migration card", "IMMIGRATION", True, 15),
    "REGISTRATION": ("Kayıt", "Регистрация", "Registration", "IMMIGRATION", True, 15),
    "MEDICAL": ("Sağlık raporu", "Медицинская справка", "Medical certificate", "MEDICAL", True, 30),
}

# code: (name_tr, name_ru, name_en, is_paid, default_days)
LEAVE_TYPES = {
    "ANNUAL": ("Yıllık izin", "Ежегодный отпуск", "Annual leave", True, 28),
    "SICK": ("Hastalık izni", "Больничный", "Sick leave", True, 0),
    "UNPAID": ("Ücretsiz izin", "Отпуск без содержания", "Unpaid leave", False, 0),
}

# code: (name_en, entity, date_field, warning_days, critical_days)
ALERT_RULES = {
    "VISA_END": ("Visa ends", "work_status", "visa_end", 30, 7),
    "PATENT_END": ("Patent ends", "work_status", "patent_end", 30, 7),
    "REGISTRATION_END": ("Registration ends", "work_status", "registration_end", 15, 5),
    "MIGRATION_CARD_END": ("Migration card ends", "work_status", "migration_card_end", 15, 5),
    "PASSPORT_EXPIRY": ("Passport expires", "identity", "passport_expiry_date", 60, 14),
    "CONTRACT_END": ("Contract ends", "employment", "contract_end", 30, 7),
    "DOCUMENT_EXPIRY": ("Document expires", "document", "expiry_date", 30, 7),
}

# code: (name_en, rate in percent)
TAX_RULES = {
    "NDFL_RESIDENT": ("Personal income tax, resident", Decimal("13")),
    "NDFL_NON_RESIDENT": ("Personal income tax, non-resident", Decimal("30")),
}


async def seed_reference_data(session) -> int:
    """Insert default lookups whose code does not exist yet."""
    created = 0

    async def missing(model, code: str) -> bool:
        result = await session.execute(select(model.id).where(model.code == code))
        return result.scalar_one_or_none() is None

    for order, (code, (tr, ru, en, category, has_expiry, alert_days)) in enumerate(DOCUMENT_TYPES.items()):
        if await missing(DocumentTypeORM, code):
            session.add(
                DocumentTypeORM(
                    code=code, name_tr=tr, name_ru=ru, name_en=en, category=category,
                    has_expiry=has_expiry, default_alert_days=alert_days, sort_order=order,
                )
            )
            created += 1

    for order, (code, (tr, ru, en, is_paid, days)) in enumerate(LEAVE_TYPES.items()):
        if await missing(LeaveTypeORM, code):
            session.add(
                LeaveTypeORM(
                    code=code, name_tr=tr, name_ru=ru, name_en=en,
                    is_paid=is_paid, default_days=days, sort_order=order,
                )
            )
            created += 1

    for order, (code, (name, entity, field, warning, critical)) in enumerate(ALERT_RULES.items()):
        if await missing(AlertRuleORM, code):
            session.add(
                AlertRuleORM(
                    code=code, name_tr=name, name_en=name, entity=entity, date_field=field,
                    warning_days=warning, critical_days=critical, sort_order=order,
                )
            )
            created += 1

    for code, (name, rate) in TAX_RULES.items():
        if await missing(PayrollRuleORM, code):
            rule = PayrollRuleORM(code=code, name_tr=name, name_en=name, category="TAX")
            rule.versions.append(
                PayrollRuleVersionORM(rate=rate, is_percentage=True, effective_from=date(2000, 1, 1))
            )
            session.add(rule)
            created += 1

    return created


async def create_superadmin(email: str, password: str, name: str) -> bool:
    """Create a user holding the SUPER_ADMIN role."""
    password_service = get_password_service()

    errors = password_service.validate_password_strength(password)
    if errors:
        print(f"Password validation failed: {errors}")
        return False

    async with async_session_maker() as session:
        result = await session.execute(select(UserORM.id).where(UserORM.email == email.lower()))
        if result.scalar_one_or_none() is not None:
            print(f"User {email} already exists")
            return False

        result = await session.execute(select(RoleORM).where(RoleORM.code == "SUPER_ADMIN"))
        role = result.scalar_one_or_none()
        if role is None:
            print("SUPER_ADMIN role not found")
            return False

        user = UserORM(
            email=email.lower(),
            name=name,
            password_hash=password_service.hash_password(password),
        )
        session.add(user)
        await session.flush()
        session.add(UserRoleORM(user_id=user.id, role_id=role.id))

        await session.commit()
        print(f"Super administrator created: {email}")
        return True


async def main(args: argparse.Namespace) -> None:
    if args.create_tables:
        await create_tables()

    grants = await sync_system_role_permissions()
    print(f"System roles synced: {grants}")

    if args.reference_data:
        async with async_session_maker() as session:
            created = await seed_reference_data(session)
            await session.commit()
        print(f"Reference entries created: {created}")

    if args.email:
        await create_superadmin(args.email, args.password, args.name or args.email)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed roles, reference data and a super administrator")
    parser.add_argument("--email", help="Email address of the super administrator")
    parser.add_argument("--password", help="Password (min 8 chars)")
    parser.add_argument("--name", help="Display name")
    parser.add_argument("--create-tables", action="store_true", help="Create missing tables first")
    parser.add_argument("--reference-data", action="store_true", help="Insert default lookups")
    args = parser.parse_args()

    if args.email and not args.password:
        parser.error("--password is required with --email")

    asyncio.run(main(args))
