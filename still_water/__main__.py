from still_water.app import main

main()
