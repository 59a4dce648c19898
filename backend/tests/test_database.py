"""
StudyHub Backend — Session Helper Tests
========================================

What we test:
    ✅ commit_session commits on success
    ✅ A failed commit is rolled back and surfaces as DatabaseError
"""

import pytest
from sqlalchemy.exc import OperationalError

from studyhub.database import commit_session
from studyhub.exceptions import DatabaseError


class TestCommitSession:

    @pytest.mark.asyncio
    async def test_commits(self, mock_db_session):
        await commit_session(mock_db_session)
        mock_db_session.commit.assert_awaited_once()
        mock_db_session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_commit_rolls_back(self, mock_db_session):
        mock_db_session.commit.side_effect = OperationalError("COMMIT", {}, Exception("disk full"))

        with pytest.raises(DatabaseError) as exc_info:
            await commit_session(mock_db_session)

        mock_db_session.rollback.assert_awaited_once()
        assert exc_info.value.context["error_type"] == "OperationalError"
