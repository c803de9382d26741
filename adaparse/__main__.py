'''
Run the analyzer over a source file (or stdin) from the command line.
'''
import sys

from adaparse.analyzer import main_compiler_pipeline_cli


sys.exit(main_compiler_pipeline_cli())
