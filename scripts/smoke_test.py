"""
Smoke test for the grouping engine.

This script validates that:
1. The bundled sample data loads with the default config
2. A synthetic roster fills the preference store without errors
3. Greedy assignment places everyone exactly once
4. Swap refinement never lowers the total score

Usage:
    python scripts/smoke_test.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import logging
import numpy as np

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def run_smoke_test(n_people: int = 40, group_size: int = 4, seed: int = 42):
    """Run smoke tests on loading, assignment and refinement."""

    logger.info("=" * 60)
    logger.info("SMOKE TEST: Grouping Engine")
    logger.info("=" * 60)

    from grouping.configs import load_config
    from grouping.data_loading import load_constraints, load_people, load_ratings
    from grouping.entities import ConstraintKind, PreferenceStore
    from grouping.evaluation import create_grouping_report
    from grouping.optimization import GroupingConfig, run_assignment
    from grouping.pair_generation import PairIndex, generate_pairs

    results = {"sample": {}, "synthetic": {}}

    # =========================================================================
    # Test sample data
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("TEST 1: Sample Data")
    logger.info("=" * 60)

    try:
        config_path = project_root / "configs" / "config.yaml"
        config = load_config(str(config_path))
        data_dir = config_path.parent

        people = load_people(str(data_dir / config["data"]["people"]))
        ratings = load_ratings(str(data_dir / config["data"]["ratings"]), people)
        constraints = load_constraints(str(data_dir / config["data"]["constraints"]), people)
        logger.info(f"  People: {len(people)}")
        logger.info(f"  Ratings: {len(ratings)}")
        logger.info(f"  Constraints: {len(constraints)}")

        results["sample"]["status"] = "PASSED"

    except Exception as e:
        logger.error(f"  SAMPLE TEST FAILED: {e}")
        results["sample"]["status"] = f"FAILED - {e}"
        import traceback
        traceback.print_exc()

    # =========================================================================
    # Test synthetic roster
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info(f"TEST 2: Synthetic Roster ({n_people} people)")
    logger.info("=" * 60)

    try:
        rng = np.random.default_rng(seed)
        store = PreferenceStore()
        for i in range(n_people):
            store.add_person(f"Person {i + 1}")

        pairs = generate_pairs(store.people)
        for a, b in pairs:
            draw = rng.random()
            if draw < 0.02:
                store.set_constraint(a.id, b.id, ConstraintKind.MUST_PAIR)
            elif draw < 0.06:
                store.set_constraint(a.id, b.id, ConstraintKind.CANNOT_PAIR)
            elif draw < 0.7:
                store.set_rating(a.id, b.id, int(rng.integers(1, 6)))

        rated, total = store.progress()
        logger.info(f"  Pairs rated or constrained: {rated}/{total}")

        inputs = store.snapshot()
        index = PairIndex(inputs.ratings, inputs.constraints)

        greedy = run_assignment(inputs, GroupingConfig(group_size=group_size))
        placed = sorted(pid for group in greedy for pid in group.member_ids)
        if placed != sorted(p.id for p in inputs.people):
            raise AssertionError("assignment did not place every person exactly once")
        logger.info(f"  Greedy: {len(greedy)} groups, total score {greedy.total_score}")
        logger.info(f"  Greedy warnings: {len(greedy.warnings)}")

        refined = run_assignment(inputs, GroupingConfig(group_size=group_size, refine=True))
        logger.info(f"  Refined: total score {refined.total_score}")
        if refined.total_score < greedy.total_score:
            raise AssertionError("refinement lowered the total score")

        report = create_grouping_report(refined, index)
        logger.info(f"  Efficiency: {report.efficiency:.1%}")

        results["synthetic"]["status"] = "PASSED"

    except Exception as e:
        logger.error(f"  SYNTHETIC TEST FAILED: {e}")
        results["synthetic"]["status"] = f"FAILED - {e}"
        import traceback
        traceback.print_exc()

    # =========================================================================
    # Summary
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("SMOKE TEST SUMMARY")
    logger.info("=" * 60)

    all_passed = True
    for name, result in results.items():
        status = result.get("status", "UNKNOWN")
        logger.info(f"  {name.upper()}: {status}")
        if "FAILED" in status:
            all_passed = False

    if all_passed:
        logger.info("\n  ALL TESTS PASSED")
        return 0
    else:
        logger.error("\n  SOME TESTS FAILED")
        return 1


if __name__ == "__main__":
    sys.exit(run_smoke_test())
