from genmon_info.main import main

main()
