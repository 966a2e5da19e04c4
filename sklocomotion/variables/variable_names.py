"""Names of the variable sets, used to look up Jacobian blocks."""

BASE_LIN_NODES = 'base-lin'
BASE_ANG_NODES = 'base-ang'
EE_MOTION_NODES = 'ee-motion_'
EE_FORCE_NODES = 'ee-force_'
CONTACT_SCHEDULE = 'ee-schedule'
EE_LOAD = 'ee-load'


def ee_motion_nodes(ee):
    return EE_MOTION_NODES + str(ee)


def ee_force_nodes(ee):
    return EE_FORCE_NODES + str(ee)


def ee_schedule(ee):
    return CONTACT_SCHEDULE + str(ee)
