"""Single source of truth for expected geoid model test fixtures.

This module defines the list of expected fixture filenames used by both:
- scripts/gen_fixtures.py (generation verification)
- tests/gis/test_fixtures_sanity.py (existence verification)

Location: shared/ (not tests/) to avoid scripts->tests dependency.

When adding/removing fixtures, update ONLY this list.
"""

from __future__ import annotations

# Sorted alphabetically for deterministic comparison.
EXPECTED_FIXTURES: list[str] = sorted(
    [
        "bad_header.dat",  # Header with wrong column names
        "geoid_2x2.dat",  # Four-node grid, tab separated
        "geoid_legacy_pt08.dat",  # Excerpt for the legacy flat layout
        "geoid_regular_3x4.dat",  # North-to-south grid, space separated
        "header_only.dat",  # No data rows
        "single_row.dat",  # Degenerate: one record
        "two_tokens.dat",  # Data row with two numbers
    ]
)

# Count derived from list for verification
EXPECTED_FIXTURE_COUNT: int = len(EXPECTED_FIXTURES)
