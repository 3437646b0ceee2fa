#!/usr/bin/env python3
"""
Delete a user and all of their data on behalf of an administrator.

Usage:
	python scripts/delete_user.py --admin-id <admin_uid> --user-id <user_id>
"""
from __future__ import annotations

import argparse
import asyncio
import json
import sys

from userpurge.core.logging import configure_logging
from userpurge.core.settings import load_settings
from userpurge.domain.usecase.admin import CallerContext, DeleteUserAndData
from userpurge.domain.usecase.errors import OperationError
from userpurge.infra import db as db_module
from userpurge.infra.identity.fusionauth import FusionAuthIdentityStore
from userpurge.infra.mongo.document_store import MongoDocumentStore


async def run(admin_id: str, user_id: str) -> int:
	settings = load_settings()
	configure_logging(settings, filename="cli.log")
	db_module.configure(settings)
	usecase = DeleteUserAndData.build(
		MongoDocumentStore(db_module.get_db()),
		FusionAuthIdentityStore.from_settings(settings),
		max_concurrent_writes=settings.max_concurrent_writes,
	)
	try:
		result = await usecase.execute(CallerContext(uid=admin_id), {"userId": user_id})
	except OperationError as err:
		print(json.dumps({"error": err.to_payload()}, indent=2, default=str))
		return 1
	finally:
		await db_module.close_client()
	print(json.dumps(result.to_payload(), indent=2))
	return 0


def main() -> None:
	parser = argparse.ArgumentParser(description="Delete a user and all related data")
	parser.add_argument("--admin-id", required=True, help="uid of the administrator performing the deletion")
	parser.add_argument("--user-id", required=True, help="uid of the user to delete")
	args = parser.parse_args()

	sys.exit(asyncio.run(run(args.admin_id, args.user_id)))


if __name__ == "__main__":
	main()
