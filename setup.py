from setuptools import find_namespace_packages, setup

# The package is pure Python; the pixel work is done with numpy and Pillow.
#  python3 -m pip install -e .[test]
setup(
    name = 'JazzJackrabbit',
    version = '0.1.0',
    description = 'Reads the data files of Jazz Jackrabbit and Jazz Jackrabbit 2 and exports previews of them.',
    package_dir = {'': 'src'},
    packages = find_namespace_packages(where = 'src'),
    python_requires = '>=3.8',
    install_requires = [
        'asset_extraction_framework',
        'self_documenting_struct',
        'numpy',
        'Pillow',
    ],
    extras_require = {
        'test': ['pytest'],
    },
    entry_points = {
        'console_scripts': [
            'JazzJackrabbit = JazzJackrabbit.Engine:main',
        ],
    })
