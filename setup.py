# https://click.palletsprojects.com/en/8.1.x/setuptools/
#
# setup.py file to install depget as a command line tool
import setuptools

setuptools.setup(
    name='depget',
    version='0.1.0',
    install_requires=[
        'click',
        'click-aliases',
        'networkx',
        'rich',
        'extended-configparser',
        'psutil',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    packages=setuptools.find_packages(include=['depget', 'depget.*']),
    entry_points={
        'console_scripts': [
            'depget=depget.cli:cli',
        ],
    },
)
