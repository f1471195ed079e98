"""
Management command to run the generational trainer.

Usage:
    python manage.py train_daemon [--population 256] [--mode batched] [--generations 0]

Trains follow-the-target controllers indefinitely (or for a fixed number
of generations). Ctrl-C requests cancellation; the trainer stops at the
next phase boundary and discards the unfinished generation.
"""
import signal
import threading
from dataclasses import replace

from django.core.exceptions import ImproperlyConfigured
from django.core.management.base import BaseCommand, CommandError

from apps.neuro.evolution import OPERATOR_ORDER
from apps.neuro.training import MODES


class Command(BaseCommand):
    help = 'Evolve follow-the-target controllers until interrupted'

    def add_arguments(self, parser):
        parser.add_argument(
            '--population',
            type=int,
            dest='population_size',
            help='Number of individuals (default: from settings)',
        )
        parser.add_argument(
            '--hidden',
            type=int,
            dest='layer1',
            help='Hidden layer size (default: from settings)',
        )
        parser.add_argument(
            '--brake',
            action='store_true',
            help='Add a fourth output used as a brake',
        )
        parser.add_argument(
            '--generations',
            type=int,
            default=0,
            help='Stop after this many generations; 0 runs until interrupted (default: 0)',
        )
        parser.add_argument(
            '--mode',
            type=str,
            choices=MODES,
            help='realtime (one tick per frame) or batched (bursts of ticks)',
        )
        parser.add_argument(
            '--batch-ticks',
            type=int,
            help='Ticks per burst in batched mode',
        )
        parser.add_argument(
            '--cycle-time',
            type=float,
            help='Simulated seconds per generation',
        )
        parser.add_argument(
            '--fixed-dt',
            type=float,
            help='Simulated seconds per tick',
        )
        parser.add_argument(
            '--workers',
            type=int,
            help='Worker threads for the parallel fan-out (default: one per CPU)',
        )
        parser.add_argument(
            '--seed',
            type=int,
            help='Run seed for reproducible training',
        )
        parser.add_argument(
            '--operators',
            nargs='+',
            choices=OPERATOR_ORDER,
            dest='update_operators',
            help='Update operators applied to non-champions',
        )
        parser.add_argument(
            '--copy-rate',
            type=float,
            help='Lerp factor towards the champion',
        )
        parser.add_argument(
            '--mutate-rate',
            type=float,
            help='Per-parameter mutation probability',
        )
        parser.add_argument(
            '--evolve-rate',
            type=float,
            help='Per-parameter crossover probability',
        )
        parser.add_argument(
            '--target-radius',
            type=float,
            default=0.0,
            help='Move the target randomly within this radius every generation',
        )

    def handle(self, *args, **options):
        from apps.neuro.environments import FollowTargetEnvironment
        from apps.neuro.networks import follow_topology
        from apps.neuro.seeding import STREAM_ENVIRONMENT, derive_seed
        from apps.neuro.training import (
            GenerationalTrainer,
            MODE_REALTIME,
            NullClock,
            RealTimeClock,
            TrainerConfig,
        )

        overrides = {
            name: options.get(name)
            for name in (
                'population_size', 'layer1', 'mode', 'batch_ticks', 'cycle_time',
                'fixed_dt', 'workers', 'seed', 'update_operators', 'copy_rate',
                'mutate_rate', 'evolve_rate',
            )
        }

        try:
            config = TrainerConfig.from_settings(**overrides)
            topology = follow_topology(hidden_size=config.layer1, brake=options['brake'])
            config = replace(config, layer0=topology.layer0, layer2=topology.layer2)
            environment = FollowTargetEnvironment(
                config.population_size,
                target_radius=options['target_radius'],
                seed=None if config.seed is None else derive_seed(config.seed, STREAM_ENVIRONMENT),
            )
            clock = RealTimeClock() if config.mode == MODE_REALTIME else NullClock()
            trainer = GenerationalTrainer.from_config(config, environment, clock=clock)
        except (ImproperlyConfigured, ValueError) as e:
            raise CommandError(str(e))

        generations = options['generations'] or None
        self.stdout.write(
            f"Training {config.population_size} x {config.topology} "
            f"({config.mode}, {config.evaluation_ticks} ticks/generation, "
            f"seed {trainer.population.seed})"
        )

        stop_event = threading.Event()
        previous_handler = signal.signal(signal.SIGINT, lambda *_: stop_event.set())

        completed = 0
        try:
            while generations is None or completed < generations:
                if not trainer.run(max_generations=1, stop_event=stop_event):
                    break
                completed += 1
                self._report(trainer.stats_history[-1])
        finally:
            signal.signal(signal.SIGINT, previous_handler)
            trainer.close()

        champion = trainer.population.champion
        self.stdout.write(self.style.SUCCESS(
            f"\nStopped after {completed} generation(s)"
            f"\n  Champion: {champion.individual_id}"
            f"\n  Champion score: {champion.score:.4f}"
        ))

    def _report(self, stats):
        marker = ' *' if stats.improved else ''
        self.stdout.write(
            f"Gen {stats.generation:5d} | "
            f"best {stats.best_score:10.4f} | "
            f"mean {stats.mean_score:10.4f} | "
            f"champion {stats.champion_id} ({stats.champion_score:.4f}){marker}"
        )
