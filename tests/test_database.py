"""Unit tests for the commit helpers that turn constraint violations into conflicts."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError, OperationalError

from rawa.core.database import commit_or_conflict
from rawa.core.exceptions import Conflict
from rawa.services import auth_flow


def _integrity_error() -> IntegrityError:
    return IntegrityError("INSERT INTO users ...", {}, Exception("duplicate key value"))


class TestCommitOrConflict(unittest.TestCase):
    def test_clean_commit(self) -> None:
        session = MagicMock()
        commit_or_conflict(session, "taken")
        session.commit.assert_called_once()
        session.rollback.assert_not_called()

    def test_integrity_error_rolls_back_and_raises_conflict(self) -> None:
        session = MagicMock()
        session.commit.side_effect = _integrity_error()
        with self.assertRaises(Conflict) as ctx:
            commit_or_conflict(session, "Currency code already exists")
        self.assertEqual(ctx.exception.message, "Currency code already exists")
        self.assertEqual(ctx.exception.status_code, 409)
        session.rollback.assert_called_once()

    def test_other_store_errors_propagate(self) -> None:
        session = MagicMock()
        session.commit.side_effect = OperationalError("COMMIT", {}, Exception("connection lost"))
        with self.assertRaises(OperationalError):
            commit_or_conflict(session, "taken")
        session.rollback.assert_not_called()


class TestAuthFlowCommit(unittest.TestCase):
    def test_integrity_error_becomes_conflict(self) -> None:
        session = MagicMock()
        session.commit.side_effect = _integrity_error()
        with self.assertRaises(Conflict) as ctx:
            auth_flow._commit(session)
        self.assertEqual(ctx.exception.message, "Username or email already exists")
        session.rollback.assert_called()

    def test_other_store_errors_roll_back_and_propagate(self) -> None:
        session = MagicMock()
        session.commit.side_effect = OperationalError("COMMIT", {}, Exception("connection lost"))
        with self.assertLogs("rawa.services.auth_flow", level="ERROR"):
            with self.assertRaises(OperationalError):
                auth_flow._commit(session)
        session.rollback.assert_called_once()


if __name__ == "__main__":
    unittest.main()
