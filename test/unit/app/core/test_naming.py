"""Tests for random stored file names."""

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from app.core import naming
from app.core.exceptions import EntropySourceFailure
from app.core.naming import ALPHABET, RANDOM_NAME_LENGTH, file_extension, random_string, stored_name_for


class TestRandomString:
    """Tests for random_string function."""

    def test_alphabet_has_64_unique_characters(self) -> None:
        assert len(ALPHABET) == 64
        assert len(set(ALPHABET)) == 64

    @pytest.mark.parametrize("length", [0, 1, 10, 25, 100])
    def test_exact_length_from_alphabet(self, length: int) -> None:
        """Verify output length and character set."""
        value = random_string(length)
        assert len(value) == length
        assert set(value) <= set(ALPHABET)

    def test_no_collisions(self) -> None:
        """Verify 10,000 draws of length 10 never collide."""
        values = {random_string(10) for _ in range(10_000)}
        assert len(values) == 10_000

    def test_negative_length_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            random_string(-1)

    def test_non_integer_length_rejected(self) -> None:
        with pytest.raises(BeartypeCallHintParamViolation):
            random_string("10")  # type: ignore[arg-type]

    def test_entropy_failure_propagates(self, monkeypatch) -> None:
        """Verify a broken random source raises instead of degrading."""

        def broken_choice(seq):
            raise OSError("getrandom failed")

        monkeypatch.setattr(naming.secrets, "choice", broken_choice)

        with pytest.raises(EntropySourceFailure) as exc_info:
            random_string(5)

        assert isinstance(exc_info.value.__cause__, OSError)


class TestStoredName:
    """Tests for naming policy helpers."""

    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("img.png", ".png"),
            ("archive.tar.gz", ".gz"),
            ("README", ""),
            ("photo.JPG", ".JPG"),
        ],
    )
    def test_file_extension(self, filename: str, expected: str) -> None:
        """Verify the last suffix is kept verbatim with its dot."""
        assert file_extension(filename) == expected

    def test_keeps_original_without_rename(self) -> None:
        assert stored_name_for("My Photo.png", rename=False) == "My Photo.png"

    def test_random_name_with_rename(self) -> None:
        name = stored_name_for("photo.JPG", rename=True)
        assert len(name) == RANDOM_NAME_LENGTH + 4
        assert name.endswith(".JPG")
        assert name != stored_name_for("photo.JPG", rename=True)
