from coderun_api.app import main

main()
