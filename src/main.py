import sys
import logging

from config import EngineConfig
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)


def main():
    config = EngineConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if len(sys.argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        sys.exit(1)

    filepath = sys.argv[1]
    engine = PaymentsEngine(config)
    try:
        engine.process_file(filepath)
    except OSError as e:
        logger.error(f"Cannot read {filepath}: {e}")
        sys.exit(1)

    print("client,available,held,total,locked")
    for snapshot in engine.snapshots():
        print(
            f"{snapshot.client},"
            f"{snapshot.available},"
            f"{snapshot.held},"
            f"{snapshot.total},"
            f"{str(snapshot.locked).lower()}"
        )


if __name__ == "__main__":
    main()
