from pipechain.cli import main

main()
