"""
Tests for the train_daemon management command.
"""
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError


class TestTrainDaemonCommand:
    """Tests for train_daemon."""

    def test_runs_fixed_generations(self):
        """A bounded run reports every generation and the champion."""
        out = StringIO()

        call_command('train_daemon', generations=2, stdout=out)

        output = out.getvalue()
        assert 'Training 8 x 6-4-3' in output
        assert output.count('Gen ') == 2
        assert 'Stopped after 2 generation(s)' in output
        assert 'Champion score:' in output

    def test_command_line_overrides(self):
        """Command line options override settings."""
        out = StringIO()

        call_command(
            'train_daemon',
            '--population', '5',
            '--hidden', '3',
            '--operators', 'mutate', 'evolve',
            '--generations', '1',
            stdout=out,
        )

        output = out.getvalue()
        assert 'Training 5 x 6-3-3' in output
        assert 'Stopped after 1 generation(s)' in output

    def test_brake_output(self):
        """--brake adds a fourth output."""
        out = StringIO()

        call_command('train_daemon', generations=1, brake=True, stdout=out)

        assert 'x 6-4-4' in out.getvalue()

    def test_topology_ignores_settings_layers(self, neuro_settings):
        """Input and output sizes always follow the task, hidden from settings."""
        neuro_settings.NEUROEVOLUTION.update({'LAYER0': 2, 'LAYER1': 5, 'LAYER2': 1})
        out = StringIO()

        call_command('train_daemon', '--brake', '--generations', '1', stdout=out)

        assert 'x 6-5-4' in out.getvalue()

    def test_moving_target(self):
        """Training works with a moving target."""
        out = StringIO()

        call_command('train_daemon', generations=1, target_radius=5.0, stdout=out)

        assert 'Stopped after 1 generation(s)' in out.getvalue()

    def test_invalid_population(self):
        """Invalid configuration is reported as a command error."""
        with pytest.raises(CommandError):
            call_command('train_daemon', population_size=0, generations=1, stdout=StringIO())

    def test_invalid_settings(self, neuro_settings):
        """Broken settings are reported as a command error."""
        neuro_settings.NEUROEVOLUTION['MUTATE_RATE'] = 3.0

        with pytest.raises(CommandError):
            call_command('train_daemon', generations=1, stdout=StringIO())

    def test_invalid_mode(self):
        """Unknown modes are rejected by the parser."""
        with pytest.raises(CommandError):
            call_command('train_daemon', '--mode', 'warp', stdout=StringIO())
