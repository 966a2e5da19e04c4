#!/usr/bin/env python

import argparse
import logging

import numpy as np

from sklocomotion import LocomotionOptimizer
from sklocomotion import Parameters
from sklocomotion.locomotion_optimizer import initial_state_from_nominal
from sklocomotion.models import RobotModel
from sklocomotion.models import ThreeJointLegInverseKinematics
from sklocomotion.optimization import create_solver
from sklocomotion.parameters import CostName
from sklocomotion.state import BaseState
from sklocomotion.terrain import FlatGround
from sklocomotion.terrain import Slope
from sklocomotion.trajectory import compute_joint_trajectory


def main():
    parser = argparse.ArgumentParser(
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        description='Plan a quadruped trot towards a goal position'
    )
    parser.add_argument(
        '--terrain',
        choices=['flat', 'slope'],
        default='flat',
        help='Terrain the robot walks on'
    )
    parser.add_argument(
        '--goal-x',
        type=float,
        default=0.3,
        help='Forward distance of the final base position'
    )
    parser.add_argument(
        '--max-iterations',
        type=int,
        default=100,
        help='Maximum number of SLSQP iterations'
    )
    parser.add_argument(
        '--optimize-durations',
        action='store_true',
        help='Optimize the phase durations of every leg'
    )
    parser.add_argument(
        '--dt',
        type=float,
        default=0.05,
        help='Sampling period of the printed trajectory'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Log the solver progress'
    )
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.INFO)

    hip_offsets = [[0.2, 0.15, 0.0], [0.2, -0.15, 0.0],
                   [-0.2, 0.15, 0.0], [-0.2, -0.15, 0.0]]
    nominal_stance = np.array(hip_offsets) + [0.0, 0.0, -0.45]
    model = RobotModel.from_parameters(
        nominal_stance_B=nominal_stance,
        max_deviation=[0.12, 0.08, 0.08],
        mass=12.0,
        inertia_b=np.diag([0.07, 0.26, 0.24]))
    ik = ThreeJointLegInverseKinematics(hip_offsets, 0.25, 0.25)

    base, feet = initial_state_from_nominal(nominal_stance)

    # diagonal legs step together
    params = Parameters()
    params.ee_phase_durations = [[0.3, 0.25, 0.45],
                                 [0.55, 0.25, 0.2],
                                 [0.55, 0.25, 0.2],
                                 [0.3, 0.25, 0.45]]
    params.ee_in_contact_at_start = [True] * 4
    params.add_cost(CostName.BaseMotionCost, 1e-3)
    if args.optimize_durations:
        params.optimize_phase_durations()

    if args.terrain == 'slope':
        terrain = Slope(x_start=0.15, slope=0.2)
    else:
        terrain = FlatGround()

    goal = BaseState(lin_pos=[args.goal_x, 0.0, base.lin.p[2]])
    optimizer = LocomotionOptimizer()
    optimizer.set_initial_state(base, feet)
    optimizer.set_parameters(goal, params, model, terrain)

    solver = create_solver('scipy', max_iterations=args.max_iterations,
                           verbose=args.verbose)
    result = optimizer.solve_nlp(solver)
    print("=== Quadruped trot ===")
    print("Success: {}".format(result.success))
    print("Message: {}".format(result.message))
    print("Iterations: {}".format(optimizer.get_iteration_count()))
    print("Cost: {:.6f}".format(result.cost))

    trajectory = optimizer.get_trajectory(dt=args.dt)
    for state in trajectory:
        contact = ''.join('x' if c else '-' for c in state.ee_contact)
        print("t={:.2f} base={} contact={}".format(
            state.t, np.round(state.base_lin.p, 3), contact))

    _, success = compute_joint_trajectory(trajectory, ik)
    print("Reachable samples: {}/{}".format(
        int(np.count_nonzero(success.all(axis=1))), len(trajectory)))


if __name__ == '__main__':
    main()
