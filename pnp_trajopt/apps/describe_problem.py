#!/usr/bin/env python

import argparse
import json
import logging
import sys

from pnp_trajopt.config import load_config
from pnp_trajopt.config import PickAndPlaceConfig
from pnp_trajopt.coordinates import Coordinates
from pnp_trajopt.models import make_environment
from pnp_trajopt.problem import construct_problem
from pnp_trajopt.problem import PickAndPlaceConstructor


def pose_from_dict(d):
    """Return Coordinates from ``{"pos": [...], "rot": [...]}``.

    ``rot`` may be a [w, x, y, z] quaternion, [yaw, pitch, roll] angles
    or a 3x3 matrix.
    """
    return Coordinates(pos=d.get('pos'), rot=d.get('rot'))


def load_scenario(path):
    with open(path) as f:
        return json.load(f)


def build_description(scenario, phase, steps_per_phase=None, config=None):
    """Return the description of ``phase`` for a scenario dict."""
    if config is None:
        config = load_config()
    if 'config' in scenario:
        merged = config.to_dict()
        merged.update(scenario['config'])
        config = PickAndPlaceConfig.from_dict(merged)
    manipulator = scenario.get('manipulator', 'manipulator')
    env = make_environment(scenario.get('model', 'six_dof_arm'),
                           joint_values=scenario.get('joint_values'),
                           name=manipulator)
    builder = PickAndPlaceConstructor(
        env, manipulator,
        scenario.get('ee_link', 'tool0'),
        scenario.get('pick_object', 'object'),
        config=config)
    if steps_per_phase is None:
        steps_per_phase = scenario.get('steps_per_phase', 10)
    poses = scenario[phase]
    if phase == 'pick':
        return builder.build_pick_description(
            pose_from_dict(poses['approach']),
            pose_from_dict(poses['final']),
            steps_per_phase)
    return builder.build_place_description(
        pose_from_dict(poses['retreat']),
        pose_from_dict(poses['approach']),
        pose_from_dict(poses['final']),
        steps_per_phase)


def main():
    """Print the pick or place problem description of a scenario."""
    parser = argparse.ArgumentParser(
        description='Build a pick or place trajectory optimization problem '
                    'description from a JSON scenario and print it.',
        formatter_class=argparse.RawTextHelpFormatter)
    parser.add_argument(
        'scenario',
        type=str,
        help='Path to the scenario JSON file')
    parser.add_argument(
        '--phase',
        choices=['pick', 'place'],
        default='pick',
        help='Which problem to build')
    parser.add_argument(
        '--steps-per-phase',
        type=int,
        default=None,
        help='Override the number of steps per phase')
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to a JSON file with builder parameters')
    parser.add_argument(
        '--full',
        action='store_true',
        help='Print every term instead of a summary')
    parser.add_argument(
        '--construct',
        action='store_true',
        help='Also construct the problem and report its sizes')
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Print verbose output')

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s')

    try:
        scenario = load_scenario(args.scenario)
        config = load_config(args.config)
        description = build_description(
            scenario, args.phase, args.steps_per_phase, config)
        if args.full:
            output = description.to_dict()
        else:
            output = description.summary()
        if args.construct:
            problem = construct_problem(description)
            output['problem'] = {
                'n_steps': problem.n_steps,
                'n_dof': problem.n_dof,
                'n_costs': len(problem.costs),
                'n_constraints': len(problem.constraints),
                'initial_constraint_violation':
                    problem.constraint_violation(
                        problem.initial_trajectory),
            }
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(json.dumps(output, indent=2))


if __name__ == '__main__':
    main()
