import os.path as osp


data_dir = osp.abspath(osp.dirname(__file__))


def sample_scenario_path():
    """Return the path of the bundled pick-and-place scenario."""
    return osp.join(data_dir, 'sample_scenario.json')
