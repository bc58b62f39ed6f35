from setuptools import setup

package_name = 'laser_intensity_poi'

setup(
    name=package_name,
    version='0.0.0',
    packages=[package_name],
    data_files=[
        ('share/ament_index/resource_index/packages',
            ['resource/' + package_name]),
        ('share/' + package_name, ['package.xml']),
    ],
    install_requires=['setuptools', 'numpy'],
    zip_safe=True,
    maintainer='your_name',
    maintainer_email='your_email@example.com',
    description='Detects POIs in a laser scan by their relative intensity',
    license='GPL-3.0-or-later',
    tests_require=['pytest'],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'laser_intensity_poi_node = laser_intensity_poi.laser_intensity_poi_node:main',
            'poi_scan_logger = laser_intensity_poi.poi_scan_logger:main',
        ],
    },
)
