from setuptools import find_packages
from setuptools import setup


version = '0.1.0'


with open('requirements.txt') as f:
    install_requires = []
    for line in f:
        req = line.split('#')[0].strip()
        if req:
            install_requires.append(req)

test_install_requires = []
with open('requirements_test.txt') as f:
    for line in f:
        req = line.split('#')[0].strip()
        if req:
            test_install_requires.append(req)


console_scripts = [
    "pnpt=pnp_trajopt.apps.cli:main",
    "pnp-describe-problem=pnp_trajopt.apps.describe_problem:main",
]


setup(
    name='pnp-trajopt',
    version=version,
    description='Pick-and-place trajectory optimization problem builder',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    license='MIT',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Natural Language :: English',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Programming Language :: Python :: 3.13',
        'Programming Language :: Python :: Implementation :: CPython',
    ],
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={'pnp_trajopt': ['data/*.json']},
    zip_safe=False,
    python_requires='>=3.8',
    install_requires=install_requires,
    entry_points={
        "console_scripts": console_scripts,
    },
    extras_require={
        'test': test_install_requires,
        'all': test_install_requires,
    },
)
