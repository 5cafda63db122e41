import setuptools

VERSION = '0.1.0'

TEST_REQUIRES = [
    'mockito~=1.4',
    'pytest>=7',
    'pytest-cov>=4',
    'ddt~=1.6',
]

setup_params = dict(
    name='queued',
    version=VERSION,
    author='Kenneth VanderLinde',
    author_email='kwvanderlinde@gmail.com',
    url='https://github.com/kwvanderlinde/queued',
    keywords='requests cache offline retry',
    packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
    package_dir={'queued': 'queued'},
    include_package_data=True,
    description='Offline-aware request handling for the requests library: cache, queue and retry on reconnect',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    install_requires=['requests>=2.18.4'],
    extras_require={
        'dev': TEST_REQUIRES,
        'test': TEST_REQUIRES,
    },
    entry_points={},
    python_requires='>=3.7',
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Natural Language :: English',
        'Operating System :: OS Independent',

        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
    ],
)


if __name__ == '__main__':
    setuptools.setup(**setup_params)
