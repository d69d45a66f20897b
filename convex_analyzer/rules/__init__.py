"""Analysis data model and the architecture, client and configuration rules."""