from review_relay.main import main

main()
