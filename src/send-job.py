from print2file.cli import send_main

if __name__ == "__main__":
    send_main()
