from pixelbox.editor.app import main

main()
