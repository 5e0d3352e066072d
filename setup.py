from setuptools import setup, find_packages

setup(
    name='teleprompt',
    version='1.0.0',
    packages=find_packages(include=['teleprompt', 'teleprompt.*']),
    include_package_data=True,
    python_requires='>=3.10',
    install_requires=[
        'colored>=2.2.3',
        'halo>=0.0.31',
        'numpy>=1.26.2',
        'python-dotenv>=1.0.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.4',
        ],
    },
    entry_points='''
        [console_scripts]
        teleprompt=teleprompt.__main__:main
    ''',
    license='MIT',
    keywords='teleprompter pacing script reading',
    description='A teleprompter pacing engine that fits a script to a target reading time',
    long_description=open('README.md', encoding='utf-8').read(),
    long_description_content_type='text/markdown',
)
