from hcp_setup.cli.app import main

main()
