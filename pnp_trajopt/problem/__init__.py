"""Pick-and-place trajectory optimization problem descriptions.

Architecture:
- Terms: plain descriptors of costs and constraints
- Description: ordered collection of terms plus scalar settings
- Builder: assembles pick and place descriptions from key poses
- Construct: validates a description into a solver-ready problem

Usage:
    from pnp_trajopt.problem import PickAndPlaceConstructor

    builder = PickAndPlaceConstructor(env, 'manipulator', 'tool0', 'box')
    problem = builder.generate_pick_problem(approach, final, 10)
"""

from pnp_trajopt.problem.description import BasicInfo
from pnp_trajopt.problem.description import DuplicateTermError
from pnp_trajopt.problem.description import InitInfo
from pnp_trajopt.problem.description import ProblemDescription
from pnp_trajopt.problem.construct import construct_problem
from pnp_trajopt.problem.construct import ProblemConstructionError
from pnp_trajopt.problem.construct import TrajOptProblem
from pnp_trajopt.problem.builder import PickAndPlaceConstructor


__all__ = [
    'BasicInfo',
    'DuplicateTermError',
    'InitInfo',
    'PickAndPlaceConstructor',
    'ProblemConstructionError',
    'ProblemDescription',
    'TrajOptProblem',
    'construct_problem',
]
