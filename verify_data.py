import sys
import logging
import argparse
from pathlib import Path

from reelcombat.components import create_enemy
from reelcombat.content import DATA_PATH, load_content


def main(argv=None):
    parser = argparse.ArgumentParser(description="Validate a combat content directory.")
    parser.add_argument(
        "data_path",
        nargs="?",
        default=str(DATA_PATH),
        help="Content root holding schemas/ and database/ (default: packaged data)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger("DataVerification")

    data_path = Path(args.data_path)
    if not data_path.exists():
        logger.error(f"VERIFICATION FAILED: {data_path} does not exist")
        return 1

    logger.info(f"Loading content from {data_path}...")
    db, moves = load_content(data_path)

    problems = []
    for enemy_id, template in db.enemies.items():
        unknown = [move_id for move_id in template.get("moves", []) if move_id not in moves]
        if unknown:
            problems.append(f"{enemy_id}: unknown moves {unknown}")
        enemy = create_enemy(template)
        if enemy.max_hp < 1 or enemy.atk < 1:
            problems.append(f"{enemy_id}: spawns with unusable stats")

    if not db.enemies:
        problems.append("no enemy templates loaded")

    if problems:
        for problem in problems:
            logger.error(f"VERIFICATION FAILED: {problem}")
        return 1

    logger.info(
        f"VERIFICATION SUCCESSFUL: {len(db.enemies)} enemies, {len(db.moves)} moves validated."
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
