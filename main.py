import logging
import signal
import sys
import json
import argparse
import threading

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.cache import RedisCandidatePoolCache
from core.config_loader import load_config, AppConfig
from core.matching.exceptions import MatchingError
from core.matching.models import CandidateFilters, RankedCandidate
from core.matching.service import MatchingEngine
from database.init_db import init_db
from database.uow import matching_uow

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Set on SIGINT/SIGTERM so a long candidate scan aborts between candidates
cancel_event = threading.Event()


def signal_handler(sig, frame):
    logger.info("Shutdown signal received")
    cancel_event.set()


def build_engine(config: AppConfig, repo) -> MatchingEngine:
    cache = None
    if config.cache.enabled:
        cache = RedisCandidatePoolCache.from_config(config.cache)
    return MatchingEngine(
        repo.profiles,
        repo.swipes,
        repo.blocks,
        config=config.matching,
        cache=cache
    )


def format_candidate(rank: int, candidate: RankedCandidate) -> str:
    profile = candidate.profile
    name = profile.display_name or profile.user_id
    line = (
        f"{rank:>3}. {name} ({profile.user_id}) age={profile.age} "
        f"score={candidate.score:.3f} distance={candidate.distance_km:.1f}km"
    )
    if candidate.breakdown is not None:
        b = candidate.breakdown
        line += (
            f" [distance={b.distance:.2f} interests={b.interests:.2f} "
            f"age={b.age:.2f} recency={b.recency:.2f}]"
        )
    return line


def candidate_to_json(candidate: RankedCandidate) -> dict:
    return {
        'candidate_profile': candidate.profile.to_dict(),
        'compatibility_score': candidate.score,
        'distance_km': candidate.distance_km,
        'score_breakdown': candidate.breakdown.to_dict() if candidate.breakdown else None,
    }


def run_rank(args, config: AppConfig, session_factory) -> int:
    filters = CandidateFilters(
        radius_km=args.radius_km,
        min_age=args.min_age,
        max_age=args.max_age
    )
    with matching_uow(session_factory) as repo:
        engine = build_engine(config, repo)
        results = engine.find_candidates(
            args.user_id,
            filters=filters,
            page_size=args.limit,
            page=args.page,
            cancel_event=cancel_event
        )

    if args.json:
        print(json.dumps([candidate_to_json(c) for c in results], indent=2))
        return 0

    if not results:
        print(f"No candidates for {args.user_id}")
        return 0

    offset = args.page * (args.limit or config.matching.engine.default_page_size)
    for i, candidate in enumerate(results, start=offset + 1):
        print(format_candidate(i, candidate))
    return 0


def run_score(args, config: AppConfig, session_factory) -> int:
    with matching_uow(session_factory) as repo:
        engine = build_engine(config, repo)
        result = engine.compatibility_between(args.user_a, args.user_b)

    if args.json:
        print(json.dumps(candidate_to_json(result), indent=2))
    else:
        print(format_candidate(1, result))
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Matching engine driver")
    parser.add_argument('--config', type=str, default=None,
                        help='Path to config.yaml (defaults to MATCHING_CONFIG or ./config.yaml)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    rank = subparsers.add_parser('rank', help='Rank candidates for a user')
    rank.add_argument('user_id')
    rank.add_argument('--radius-km', type=float, default=None, help='Explicit search radius')
    rank.add_argument('--min-age', type=int, default=None)
    rank.add_argument('--max-age', type=int, default=None)
    rank.add_argument('--limit', type=int, default=None, help='Page size')
    rank.add_argument('--page', type=int, default=0, help='Zero-based page index')
    rank.add_argument('--json', action='store_true', help='Print JSON instead of a table')

    score = subparsers.add_parser('score', help="Score user_b from user_a's point of view")
    score.add_argument('user_a')
    score.add_argument('user_b')
    score.add_argument('--json', action='store_true')

    subparsers.add_parser('init-db', help='Create matching tables')

    args = parser.parse_args(argv)

    config = load_config(args.config)
    db_engine = create_engine(config.database.url, pool_pre_ping=True)

    if args.command == 'init-db':
        init_db(db_engine)
        return 0

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    try:
        if args.command == 'rank':
            return run_rank(args, config, session_factory)
        return run_score(args, config, session_factory)
    except MatchingError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
