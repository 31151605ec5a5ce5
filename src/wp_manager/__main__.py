from wp_manager.app import main

main()
