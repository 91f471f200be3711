# -*- coding: utf-8 -*-
"""
Play headless games with a random agent and report the maximum tiles reached.
"""
import logging
from collections import Counter
from pathlib import Path
from typing import Dict

from numpy.random import default_rng
from tqdm import trange

from slidemerge.core import GameConfiguration, legal_actions
from slidemerge.envs import GameSession
from slidemerge.storage import RecordStore


def evaluate(length: int = 10, size: int = 4, seed: int | None = None, record: Path | None = None) -> Dict[int, int]:
    """
    Play games with an agent choosing uniformly among legal moves.

    Parameters
    ----------
    length : int, optional
        The number of games to play (default is 10).
    size : int, optional
        The dimension of the board (default is 4).
    seed : int, optional
        Seed of the random generator, for reproducible runs.
    record : Path, optional
        Record file; best score and time are restored from it and saved back.

    Returns
    -------
    Dict[int, int]
        Number of games per maximum tile reached.
    """
    rng = default_rng(seed)
    session = GameSession(config=GameConfiguration(size=size), rng=rng)
    store = RecordStore(record, size=size, rng=rng) if record is not None else None
    if store is not None:
        session.load(store)
    score = []

    with trange(length) as period:
        for num in period:
            session.restart()
            done = session.is_finished

            # ##: Play a game.
            while not done:
                action = rng.choice(legal_actions(session.state.board))
                result = session.step(action)
                done = result.lost

                # ##: Log.
                period.set_description(f"Evaluation: {num + 1}")
                period.set_postfix(score=session.state.score, max=session.state.max_tile)

            # ##: Save max cells.
            score.append(session.state.max_tile)

    if store is not None:
        session.save(store)

    # ##: Final log.
    frequency = Counter(score)
    return dict(sorted(frequency.items()))


if __name__ == "__main__":
    from argparse import ArgumentParser

    parser = ArgumentParser()
    parser.add_argument("--games", type=int, default=10)
    parser.add_argument("--size", type=int, default=4)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--record", type=Path, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    result = evaluate(length=args.games, size=args.size, seed=args.seed, record=args.record)
    print(f"Evaluation on {args.games} games, max tiles: {result}")
