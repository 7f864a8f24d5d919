#!/usr/bin/env python3
"""
Bounty Snake Self-Play Benchmark

Pits two search configurations of the bounty snake against each other and
reports which one wins more often. Games are refereed in-process with the
standard 1v1 rules, so no snake servers or rules CLI are needed.

Usage:
    python benchmark_snakes.py [--iterations N] [--workers N] [--new-depth D] [--old-depth D]

The script will:
1. Run N games between the "new" and the "old" configuration
2. Alternate starting corners using prime-numbered seeds
3. Generate detailed statistics and a report
4. Save results to benchmarks/ directory
"""

import argparse
import json
import random
from collections import defaultdict
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import sympy
from tqdm import tqdm

from bounty_snake.config import SearchConfig
from bounty_snake.main import decide

PROJECT_ROOT = Path(__file__).parent

X = 'x'
Y = 'y'
STEPS = {'up': (0, 1), 'down': (0, -1), 'left': (-1, 0), 'right': (1, 0)}
START_LENGTH = 3
MAX_HEALTH = 100


@dataclass
class BenchmarkConfig:
    """Configuration for benchmark runs"""
    iterations: int = 50
    workers: int = 4
    width: int = 11
    height: int = 11
    new_depth: int = 4
    old_depth: int = 2
    max_turns: int = 500
    min_food: int = 1
    food_spawn_chance: float = 0.15
    new_snake_name: str = "NewSnake"
    old_snake_name: str = "OldSnake"

    def search_config(self, name: str) -> SearchConfig:
        depth = self.new_depth if name == self.new_snake_name else self.old_depth
        return SearchConfig(max_depth=depth)


@dataclass
class GameResult:
    """Result of a single game"""
    game_num: int
    winner: Optional[str]  # "new", "old", "draw", or None for error
    turns: int = 0
    new_snake_length: int = 0
    old_snake_length: int = 0
    death_reason_new: str = ""
    death_reason_old: str = ""
    error: str = ""


@dataclass
class BenchmarkStats:
    """Aggregated benchmark statistics"""
    total_games: int = 0
    new_wins: int = 0
    old_wins: int = 0
    draws: int = 0
    errors: int = 0

    total_turns: int = 0
    new_total_length: int = 0
    old_total_length: int = 0

    new_death_reasons: Dict[str, int] = field(default_factory=lambda: defaultdict(int))
    old_death_reasons: Dict[str, int] = field(default_factory=lambda: defaultdict(int))

    game_results: List[GameResult] = field(default_factory=list)

    @property
    def valid_games(self) -> int:
        return self.total_games - self.errors

    def rate(self, count: int) -> float:
        return count / self.valid_games * 100 if self.valid_games > 0 else 0

    @property
    def avg_turns(self) -> float:
        return self.total_turns / self.valid_games if self.valid_games > 0 else 0

    @property
    def avg_new_length(self) -> float:
        return self.new_total_length / self.valid_games if self.valid_games > 0 else 0

    @property
    def avg_old_length(self) -> float:
        return self.old_total_length / self.valid_games if self.valid_games > 0 else 0

    def record(self, result: GameResult):
        self.total_games += 1
        self.game_results.append(result)

        if result.error and result.winner is None:
            self.errors += 1
            return
        if result.winner == "new":
            self.new_wins += 1
        elif result.winner == "old":
            self.old_wins += 1
        elif result.winner == "draw":
            self.draws += 1

        self.total_turns += result.turns
        self.new_total_length += result.new_snake_length
        self.old_total_length += result.old_snake_length

        if result.death_reason_new:
            self.new_death_reasons[result.death_reason_new] += 1
        if result.death_reason_old:
            self.old_death_reasons[result.death_reason_old] += 1


class Referee:
    """
    Standard 1v1 rules: simultaneous moves, starvation, body and
    head-to-head collisions, and food spawning.
    """

    def __init__(self, width: int, height: int, rng: random.Random,
                 min_food: int = 1, food_spawn_chance: float = 0.15):
        self.width = width
        self.height = height
        self.rng = rng
        self.min_food = min_food
        self.food_spawn_chance = food_spawn_chance
        self.snakes: Dict[str, Dict] = {}
        self.food: List[Dict] = []
        self.turn = 0

    def setup(self, names: List[str]):
        """Place the snakes in opposite corners with a food item beside each."""
        corners = [(1, 1), (self.width - 2, self.height - 2),
                   (1, self.height - 2), (self.width - 2, 1)]
        start = self.rng.choice([corners[:2], corners[2:]])
        self.rng.shuffle(start)

        for name, (x, y) in zip(names, start):
            self.snakes[name] = {
                'id': name,
                'name': name,
                'health': MAX_HEALTH,
                'body': [{X: x, Y: y} for _ in range(START_LENGTH)],
            }
            fx = x + 1 if x < self.width // 2 else x - 1
            fy = y + 1 if y < self.height // 2 else y - 1
            self.food.append({X: fx, Y: fy})

        self.food.append({X: self.width // 2, Y: self.height // 2})

    def game_state(self, name: str) -> Dict:
        """Payload as the named snake would receive it."""
        snakes = [dict(s, head=s['body'][0], length=len(s['body'])) for s in self.snakes.values()]
        you = next(s for s in snakes if s['id'] == name)
        return {
            'game': {'id': 'benchmark'},
            'turn': self.turn,
            'board': {
                'width': self.width,
                'height': self.height,
                'food': list(self.food),
                'snakes': snakes,
            },
            'you': you,
        }

    def is_over(self) -> bool:
        return len(self.snakes) <= 1

    def step(self, moves: Dict[str, str]) -> Dict[str, str]:
        """
        Resolve one turn. Returns {name: death reason} for eliminated snakes.
        """
        self.turn += 1

        for name, snake in self.snakes.items():
            dx, dy = STEPS[moves[name]]
            head = snake['body'][0]
            snake['body'] = [{X: head[X] + dx, Y: head[Y] + dy}] + snake['body'][:-1]
            snake['health'] -= 1

        eaten = []
        for snake in self.snakes.values():
            head = snake['body'][0]
            if head in self.food:
                snake['health'] = MAX_HEALTH
                snake['body'].append(dict(snake['body'][-1]))
                eaten.append(head)
        self.food = [item for item in self.food if item not in eaten]

        eliminated = {}
        for name, snake in self.snakes.items():
            reason = self._death_reason(name, snake)
            if reason:
                eliminated[name] = reason

        for name in eliminated:
            del self.snakes[name]

        self._spawn_food()
        return eliminated

    def _death_reason(self, name: str, snake: Dict) -> str:
        head = snake['body'][0]
        if not (0 <= head[X] < self.width and 0 <= head[Y] < self.height):
            return "out-of-bounds"
        if snake['health'] <= 0:
            return "starvation"
        if head in snake['body'][1:]:
            return "self-collision"
        for other_name, other in self.snakes.items():
            if other_name == name:
                continue
            if head in other['body'][1:]:
                return "snake-collision"
            if head == other['body'][0] and len(snake['body']) <= len(other['body']):
                return "head-collision"
        return ""

    def _spawn_food(self):
        if len(self.food) >= self.min_food and self.rng.random() >= self.food_spawn_chance:
            return
        occupied = {(seg[X], seg[Y]) for s in self.snakes.values() for seg in s['body']}
        occupied.update((item[X], item[Y]) for item in self.food)
        free = [(x, y) for x in range(self.width) for y in range(self.height) if (x, y) not in occupied]
        if free:
            x, y = self.rng.choice(free)
            self.food.append({X: x, Y: y})


def run_single_game(game_num: int, seed: str, config: BenchmarkConfig) -> GameResult:
    """Play one game to completion and return the result"""
    names = [config.new_snake_name, config.old_snake_name]
    referee = Referee(config.width, config.height, random.Random(seed),
                      min_food=config.min_food, food_spawn_chance=config.food_spawn_chance)
    referee.setup(names)
    result = GameResult(game_num=game_num, winner=None)
    lengths = {name: START_LENGTH for name in names}
    reasons: Dict[str, str] = {}

    try:
        while not referee.is_over() and referee.turn < config.max_turns:
            moves = {}
            for name in referee.snakes:
                moves[name], _ = decide(referee.game_state(name), config.search_config(name))
            for name, snake in referee.snakes.items():
                lengths[name] = len(snake['body'])
            reasons.update(referee.step(moves))
    except Exception as e:
        result.error = str(e)
        return result

    for name, snake in referee.snakes.items():
        lengths[name] = len(snake['body'])

    result.turns = referee.turn
    result.new_snake_length = lengths[config.new_snake_name]
    result.old_snake_length = lengths[config.old_snake_name]
    result.death_reason_new = reasons.get(config.new_snake_name, "")
    result.death_reason_old = reasons.get(config.old_snake_name, "")

    survivors = list(referee.snakes)
    if len(survivors) == 1:
        result.winner = "new" if survivors[0] == config.new_snake_name else "old"
    else:
        # Both eliminated on the same turn, or the turn limit was hit
        result.winner = "draw"

    return result


def confidence_interval(wins: int, games: int) -> Tuple[float, float]:
    """Normal-approximation 95% interval for a win rate."""
    p = wins / games if games > 0 else 0
    se = (p * (1 - p) / games) ** 0.5 if games > 0 else 0
    return max(0, p - 1.96 * se), min(1, p + 1.96 * se)


class BenchmarkRunner:
    """Main benchmark runner"""

    def __init__(self, config: BenchmarkConfig, output_root: Path = None):
        self.config = config
        self.stats = BenchmarkStats()

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_root = output_root or PROJECT_ROOT / "benchmarks"
        self.output_dir = output_root / f"benchmark_{timestamp}"
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def seeds(self) -> List[Tuple[int, str]]:
        """Game numbers paired with successive prime seeds"""
        game_params = []
        last_prime = 100
        for i in range(self.config.iterations):
            next_prime = sympy.nextprime(last_prime)
            game_params.append((i, str(next_prime)))
            last_prime = next_prime
        return game_params

    def run(self) -> BenchmarkStats:
        """Run all benchmark games"""
        print("=" * 70)
        print("     BOUNTY SNAKE SELF-PLAY BENCHMARK")
        print(f"     {self.config.new_snake_name} (depth {self.config.new_depth}) vs "
              f"{self.config.old_snake_name} (depth {self.config.old_depth})")
        print(f"     Running {self.config.iterations} games with {self.config.workers} workers")
        print(f"     Board: {self.config.width}x{self.config.height}")
        print("=" * 70)
        print()

        with ProcessPoolExecutor(max_workers=self.config.workers) as executor:
            futures = {
                executor.submit(run_single_game, game_num, seed, self.config): game_num
                for game_num, seed in self.seeds()
            }

            bar_fmt = "{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}] {postfix}"
            with tqdm(total=self.config.iterations, desc="Running games", bar_format=bar_fmt) as pbar:
                for future in as_completed(futures):
                    self.stats.record(future.result())
                    pbar.set_postfix({
                        "New": self.stats.new_wins,
                        "Old": self.stats.old_wins,
                        "Draw": self.stats.draws,
                    })
                    pbar.update(1)

        return self.stats

    def _death_section(self, title: str, reasons: Dict[str, int]) -> List[str]:
        lines = [title, "-" * 40]
        for reason, count in sorted(reasons.items(), key=lambda x: -x[1]):
            lines.append(f"   {reason:30s} {count:4d} ({self.stats.rate(count):5.1f}%)")
        lines.append("")
        return lines

    def generate_report(self) -> str:
        """Generate a summary report"""
        s = self.stats
        c = self.config

        report = ["", "=" * 70, "                    BENCHMARK REPORT", "=" * 70]

        report.append("\nOVERALL RESULTS")
        report.append("-" * 40)
        report.append(f"   Total Games:     {s.total_games}")
        report.append(f"   Valid Games:     {s.valid_games}")
        report.append(f"   Errors:          {s.errors}")
        report.append("")

        report.append("WIN RATES")
        report.append("-" * 40)
        report.append(f"   {c.new_snake_name} (new):  {s.new_wins:4d} wins ({s.rate(s.new_wins):5.1f}%)")
        report.append(f"   {c.old_snake_name} (old):  {s.old_wins:4d} wins ({s.rate(s.old_wins):5.1f}%)")
        report.append(f"   Draws:           {s.draws:4d}      ({s.rate(s.draws):5.1f}%)")
        report.append("")

        report.append("PERFORMANCE STATISTICS")
        report.append("-" * 40)
        report.append(f"   Average Game Length:    {s.avg_turns:.1f} turns")
        report.append(f"   Avg New Snake Length:   {s.avg_new_length:.1f}")
        report.append(f"   Avg Old Snake Length:   {s.avg_old_length:.1f}")
        report.append("")

        if s.new_death_reasons:
            report.extend(self._death_section(f"{c.new_snake_name} DEATH REASONS", s.new_death_reasons))
        if s.old_death_reasons:
            report.extend(self._death_section(f"{c.old_snake_name} DEATH REASONS", s.old_death_reasons))

        if s.valid_games >= 30:
            ci_low, ci_high = confidence_interval(s.new_wins, s.valid_games)
            report.append("STATISTICAL ANALYSIS")
            report.append("-" * 40)
            report.append(f"   95% Confidence Interval: [{ci_low*100:.1f}%, {ci_high*100:.1f}%]")
            if ci_low > 0.5:
                report.append("   New configuration is SIGNIFICANTLY BETTER (p < 0.05)")
            elif ci_high < 0.5:
                report.append("   New configuration is SIGNIFICANTLY WORSE (p < 0.05)")
            else:
                report.append("   No statistically significant difference")
            report.append("")

        report.append("=" * 70)
        report.append(f"   Results saved to: {self.output_dir}")
        report.append("=" * 70)

        return "\n".join(report)

    def save_results(self):
        """Save benchmark results to files"""
        summary = {
            "config": {
                "iterations": self.config.iterations,
                "width": self.config.width,
                "height": self.config.height,
                "new_depth": self.config.new_depth,
                "old_depth": self.config.old_depth,
            },
            "results": {
                "total_games": self.stats.total_games,
                "new_wins": self.stats.new_wins,
                "old_wins": self.stats.old_wins,
                "draws": self.stats.draws,
                "errors": self.stats.errors,
                "avg_turns": self.stats.avg_turns,
                "avg_new_length": self.stats.avg_new_length,
                "avg_old_length": self.stats.avg_old_length,
            },
            "death_reasons": {
                "new_snake": dict(self.stats.new_death_reasons),
                "old_snake": dict(self.stats.old_death_reasons),
            },
            "timestamp": datetime.now().isoformat(),
        }

        with open(self.output_dir / "summary.json", "w") as f:
            json.dump(summary, f, indent=2)

        report = self.generate_report()
        with open(self.output_dir / "report.txt", "w") as f:
            f.write(report)

        print(report)


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark two search depths of the bounty snake against each other",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python benchmark_snakes.py                       # 50 games, depth 4 vs depth 2
    python benchmark_snakes.py --iterations 200      # Longer run
    python benchmark_snakes.py --new-depth 6         # Try the default search depth
        """
    )
    parser.add_argument("--iterations", "-n", type=int, default=50,
                        help="Number of games to run (default: 50)")
    parser.add_argument("--workers", "-w", type=int, default=4,
                        help="Number of parallel workers (default: 4)")
    parser.add_argument("--width", type=int, default=11, help="Board width (default: 11)")
    parser.add_argument("--height", type=int, default=11, help="Board height (default: 11)")
    parser.add_argument("--new-depth", type=int, default=4,
                        help="Search depth of the new configuration (default: 4)")
    parser.add_argument("--old-depth", type=int, default=2,
                        help="Search depth of the old configuration (default: 2)")

    args = parser.parse_args()

    config = BenchmarkConfig(
        iterations=args.iterations,
        workers=args.workers,
        width=args.width,
        height=args.height,
        new_depth=args.new_depth,
        old_depth=args.old_depth,
    )

    runner = BenchmarkRunner(config)
    runner.run()
    runner.save_results()


if __name__ == "__main__":
    main()
