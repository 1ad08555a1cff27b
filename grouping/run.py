"""
Main runner for the grouping system.

This is the single entrypoint for grouping a roster from files on disk.

Usage:
    python -m grouping.run --config configs/config.yaml

The runner performs the following steps:
1. Load and validate the configuration
2. Load people, pair ratings and pair constraints
3. Apply them to a preference store and take a snapshot
4. Run the assignment engine
5. Build the report and export groups, pair matrix and report
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def run_grouping(
    config_path: str,
    group_size: Optional[int] = None,
    output_dir: Optional[str] = None,
    refine: Optional[bool] = None
) -> Dict[str, Any]:
    """
    Run the complete grouping pipeline.

    Args:
        config_path: Path to the configuration YAML file
        group_size: If provided, overrides grouping.group_size (and num_groups)
        output_dir: If provided, write outputs to this directory instead of config default
        refine: If provided, overrides grouping.refine

    Returns:
        Dictionary with the report and paths to written files
    """
    from .configs import get_config_value, load_config, validate_config
    from .data_loading import load_constraints, load_people, load_ratings
    from .entities import PreferenceStore
    from .evaluation import create_grouping_report
    from .export import export_groups_csv, export_rating_matrix_csv
    from .optimization import GroupingConfig, run_assignment
    from .pair_generation import PairIndex

    # =========================================================================
    # 1. Load and validate configuration
    # =========================================================================
    logger.info("=" * 60)
    logger.info("GROUPING RUN")
    logger.info("=" * 60)

    config = load_config(config_path)
    if group_size is not None:
        config.setdefault("grouping", {})
        config["grouping"]["group_size"] = group_size
        config["grouping"]["num_groups"] = None
    if refine is not None:
        config.setdefault("grouping", {})
        config["grouping"]["refine"] = refine

    issues = validate_config(config)
    for issue in issues:
        logger.warning(f"Config issue: {issue}")

    setup_logging(get_config_value(config, "global.log_level", "INFO"))

    grouping_config = GroupingConfig.from_config(config)
    grouping_config.validate()

    config_dir = Path(config_path).resolve().parent

    def data_path(key: str) -> Optional[Path]:
        value = get_config_value(config, f"data.{key}")
        if not value:
            return None
        path = Path(value)
        return path if path.is_absolute() else config_dir / path

    # =========================================================================
    # 2. Load data
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("STEP 1: Loading Data")
    logger.info("=" * 60)

    people_path = data_path("people")
    if people_path is None:
        raise ValueError("Configuration has no data.people path")
    people = load_people(str(people_path))

    ratings_path = data_path("ratings")
    ratings = []
    if ratings_path is not None:
        ratings = load_ratings(
            str(ratings_path), people,
            min_rating=grouping_config.min_rating,
            max_rating=grouping_config.max_rating
        )

    constraints_path = data_path("constraints")
    constraints = []
    if constraints_path is not None:
        constraints = load_constraints(str(constraints_path), people)

    # =========================================================================
    # 3. Build snapshot
    # =========================================================================
    store = PreferenceStore(
        people,
        min_rating=grouping_config.min_rating,
        max_rating=grouping_config.max_rating,
        neutral_rating=grouping_config.neutral_rating
    )
    for constraint in constraints:
        try:
            store.set_constraint(constraint.person1_id, constraint.person2_id, constraint.kind)
        except (KeyError, ValueError) as e:
            logger.warning(f"Skipping constraint {constraint.id}: {e}")
    for rating in ratings:
        try:
            store.set_rating(rating.person1_id, rating.person2_id, rating.rating)
        except (KeyError, ValueError) as e:
            logger.warning(f"Skipping rating {rating.key}: {e}")

    inputs = store.snapshot()
    rated, total_pairs = store.progress()
    logger.info(f"{len(inputs.people)} people, {rated}/{total_pairs} pairs rated or constrained")

    # =========================================================================
    # 4. Assign groups
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("STEP 2: Assigning Groups")
    logger.info("=" * 60)

    assignment = run_assignment(inputs, grouping_config)
    index = PairIndex(inputs.ratings, inputs.constraints, default_rating=grouping_config.neutral_rating)

    # =========================================================================
    # 5. Report and export
    # =========================================================================
    logger.info("\n" + "=" * 60)
    logger.info("STEP 3: Report and Export")
    logger.info("=" * 60)

    report = create_grouping_report(assignment, index, max_rating=grouping_config.max_rating)
    logger.info("\n" + report.summary())

    if output_dir:
        out_dir = Path(output_dir)
    else:
        configured = Path(get_config_value(config, "global.output_dir", "artifacts"))
        out_dir = configured if configured.is_absolute() else config_dir / configured
    out_dir.mkdir(parents=True, exist_ok=True)

    artifacts = {
        "groups": str(export_groups_csv(assignment.groups, str(out_dir / "groups.csv"))),
        "rating_matrix": str(export_rating_matrix_csv(
            list(inputs.people), index, str(out_dir / "rating_matrix.csv")
        )),
        "report": str(out_dir / "report.json"),
        "config_used": str(out_dir / "config_used.yaml"),
    }
    report.save(artifacts["report"])
    with open(artifacts["config_used"], "w") as f:
        yaml.safe_dump(config, f, sort_keys=False)

    logger.info("\n" + "=" * 60)
    logger.info("GROUPING COMPLETE")
    logger.info("=" * 60)

    return {
        "success": True,
        "output_dir": str(out_dir),
        "artifacts": artifacts,
        "report": report.to_dict(),
        "config_issues": issues
    }


def main(argv=None):
    """Main entry point for the grouping runner."""
    parser = argparse.ArgumentParser(
        description="Split a roster into groups that maximize pairwise affinity"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="configs/config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--group-size",
        type=int,
        default=None,
        help="Target group size (overrides config)"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory (overrides config)"
    )
    parser.add_argument(
        "--refine",
        action="store_true",
        default=None,
        help="Run swap refinement after the greedy pass"
    )

    args = parser.parse_args(argv)

    try:
        result = run_grouping(
            args.config,
            group_size=args.group_size,
            output_dir=args.output_dir,
            refine=args.refine
        )
        if result["success"]:
            logger.info("\nGrouping completed successfully!")
            return 0
        else:
            logger.error("\nGrouping failed!")
            return 1
    except Exception as e:
        logger.exception(f"Grouping failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
