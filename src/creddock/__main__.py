from creddock.cli import main


main(prog_name="creddock")
