"""Typed domain errors carry a code and HTTP status."""

from dotlife.errors import (
    ConflictError,
    DotlifeError,
    EmptyBatchError,
    InsufficientBricksError,
    InvalidPlacementError,
    NotFoundError,
    QuestStateError,
)


class TestErrors:
    def test_response_body(self):
        err = InsufficientBricksError(needed=5, available=2)
        assert err.to_response() == {"detail": "Not enough bricks: need 5, have 2", "code": "insufficient_bricks"}
        assert err.status_code == 400

    def test_not_found(self):
        err = NotFoundError("Quest", 42)
        assert err.status_code == 404
        assert "Quest '42' not found" in err.message

    def test_invalid_placement_keeps_coordinates(self):
        err = InvalidPlacementError(3, 4, "cell is occupied")
        assert (err.x, err.y, err.reason) == (3, 4, "cell is occupied")
        assert err.code == "invalid_placement"

    def test_statuses(self):
        assert ConflictError("x").status_code == 409
        assert QuestStateError("x").status_code == 409
        assert EmptyBatchError().code == "empty_batch"

    def test_all_inherit_base(self):
        assert isinstance(EmptyBatchError(), DotlifeError)
