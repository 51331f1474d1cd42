from setuptools import setup, find_packages

setup(
    name='saffron-console',
    version='1.0.0',
    description='SpiceDB console: zed command interpreter, schema parser and highlighter',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'Django>=4.2',
        'requests>=2.31',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
        ],
    },
    entry_points={
        'saffron.executor': [
            'api = saffron_platform.executors.api_executor:ApiCommandExecutor',
            'process = saffron_platform.executors.process_executor:ProcessCommandExecutor',
        ],
    },
    python_requires='>=3.10',
)
